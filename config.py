import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, read once from the environment."""

    mongo_url: str = "mongodb://localhost:27017"
    database_name: str = "cloudmasa"

    email_host: Optional[str] = None
    email_port: int = 465
    email_secure: bool = True
    email_user: Optional[str] = None
    email_pass: Optional[str] = None
    admin_email: Optional[str] = None
    brand_name: str = "CloudMaSa"

    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    port: int = 5000

    @property
    def from_email(self) -> str:
        return self.email_user or "no-reply@localhost"

    @property
    def admin_inbox(self) -> Optional[str]:
        return self.admin_email or self.email_user

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            mongo_url=os.getenv("MONGO_URL") or os.getenv("DATABASE_URL") or cls.mongo_url,
            database_name=os.getenv("DATABASE_NAME") or cls.database_name,
            email_host=os.getenv("EMAIL_HOST") or None,
            email_port=int(os.getenv("EMAIL_PORT") or "465"),
            email_secure=_as_bool(os.getenv("EMAIL_SECURE"), True),
            email_user=os.getenv("EMAIL_USER") or None,
            email_pass=os.getenv("EMAIL_PASS") or None,
            admin_email=os.getenv("ADMIN_EMAIL") or None,
            brand_name=os.getenv("BRAND_NAME") or cls.brand_name,
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()] or ["*"],
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            port=int(os.getenv("PORT") or "5000"),
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings.from_env()
