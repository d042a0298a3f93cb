"""
Database Schemas for the contact and consultation forms

Each Pydantic model below is the body of one form and maps to one MongoDB
collection, named by its `collection` attribute:

- Contact -> "contacts"
- Booking -> "bookings" (unique on email + date)

Timestamps (createdAt, updatedAt) are added when the document is stored.
"""

from typing import ClassVar, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FormModel(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    collection: ClassVar[str]

    @field_validator("*", mode="before")
    @classmethod
    def strip_text(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value


class Contact(FormModel):
    """
    Contact-us form submission
    Collection name: "contacts"
    """
    collection: ClassVar[str] = "contacts"

    name: Optional[str] = Field(None, description="Full name of the sender")
    company: Optional[str] = Field(None, description="Company of the sender")
    email: Optional[str] = Field(None, description="Reply address")
    source: Optional[str] = Field(None, description="Channel the lead came from")
    message: Optional[str] = Field(None, description="Free text message")


class Booking(FormModel):
    """
    Free consultation booking
    Collection name: "bookings"
    """
    collection: ClassVar[str] = "bookings"
    required: ClassVar[Tuple[str, ...]] = ("name", "company", "email", "phone", "date", "time")

    name: Optional[str] = Field(None, description="Full name of the person booking")
    company: Optional[str] = Field(None, description="Company name")
    email: Optional[str] = Field(None, description="Contact email, unique per date")
    phone: Optional[str] = Field(None, description="Phone number")
    date: Optional[str] = Field(None, description="Calendar date of the consultation")
    time: Optional[str] = Field(None, description="Time slot")

    def missing_fields(self) -> List[str]:
        return [name for name in self.required if not getattr(self, name)]
