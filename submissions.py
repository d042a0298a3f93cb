"""
The contact-us and free-consultation workflows.

Both run parse -> validate -> persist -> notify. The HTTP routes in main.py and
the serverless handlers in functions.py call these functions and only map the
raised SubmissionError to a response.
"""

import asyncio
import logging
from typing import Any, Dict, Sequence, Type, TypeVar

import pydantic
from fastapi.concurrency import run_in_threadpool

from config import get_settings
from database import create_document, is_duplicate_key
from errors import (
    DuplicateBooking,
    MalformedInput,
    NotificationFailure,
    PersistenceFailure,
    ValidationError,
)
from mailer import EmailMessage, booking_emails, contact_emails, send_email
from schemas import Booking, Contact, FormModel

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=FormModel)


def parse_form(model: Type[M], payload: Any) -> M:
    if not isinstance(payload, dict):
        raise MalformedInput()
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as e:
        logger.info("Rejected %s body: %s", model.collection, e.errors())
        raise MalformedInput() from e


async def _persist(operation: str, form: FormModel) -> str:
    try:
        return await run_in_threadpool(create_document, form.collection, form)
    except Exception as e:
        if isinstance(form, Booking) and is_duplicate_key(e):
            logger.info("%s: duplicate booking for %s on %s", operation, form.email, form.date)
            raise DuplicateBooking() from e
        logger.exception("%s: could not store %s document", operation, form.collection)
        raise PersistenceFailure() from e


async def _notify(operation: str, messages: Sequence[EmailMessage]) -> None:
    # Wait for every send to settle before reporting the first failure.
    results = await asyncio.gather(
        *(run_in_threadpool(send_email, message) for message in messages),
        return_exceptions=True,
    )
    failures = [r for r in results if isinstance(r, BaseException)]
    for failure in failures:
        logger.error("%s: email failed: %r", operation, failure, exc_info=failure)
    if failures:
        raise NotificationFailure() from failures[0]


async def submit_contact(payload: Any) -> Dict[str, Any]:
    """Store a contact request and email the admin inbox and the sender."""
    contact = parse_form(Contact, payload)
    await _persist("contact-us", contact)
    await _notify("contact-us", contact_emails(contact, get_settings()))
    return {"message": "Message sent successfully"}


async def submit_booking(payload: Any) -> Dict[str, Any]:
    """Store a consultation booking, one per email and date, and email both parties."""
    booking = parse_form(Booking, payload)
    missing = booking.missing_fields()
    if missing:
        logger.info("free-consultation: missing fields %s", ", ".join(missing))
        raise ValidationError()

    booking_id = await _persist("free-consultation", booking)
    await _notify("free-consultation", booking_emails(booking, get_settings()))
    return {"message": "Consultation booked successfully", "bookingId": booking_id}
