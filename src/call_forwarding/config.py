"""
Call Forwarding Configuration

Load configuration from environment variables and .env file.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError
from .hours.business_hours import WeeklyWindow


def _default_window() -> WeeklyWindow:
    return WeeklyWindow.from_strings("Monday", "Friday", 8, 18)


def _int_setting(env: Mapping[str, str], key: str, default: str) -> int:
    raw = env.get(key, default)
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from None


@dataclass
class Config:
    """Application configuration."""

    # Twilio
    twilio_account_sid: str
    twilio_auth_token: str
    twilio_phone_number: str  # Sender for relayed voicemail SMS

    # Where calls are forwarded and transcripts are texted
    forward_to_number: str

    # Business hours
    window: WeeklyWindow = field(default_factory=_default_window)

    # Server
    webhook_host: str = "0.0.0.0"
    webhook_port: int = 8080

    # Voicemail recording
    voicemail_max_length: int = 300
    voicemail_timeout: int = 10
    voicemail_finish_on_key: str = "#"
    unavailable_message: str = "Sorry, I was unable to redirect you. Goodbye."

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Config":
        """
        Load configuration from environment variables.

        Raises ConfigurationError when the business-hours window or a
        numeric setting cannot be parsed.
        """
        if env is None:
            env = os.environ
        window = WeeklyWindow.from_strings(
            start_day=env.get("WORK_WEEK_START", "Monday"),
            end_day=env.get("WORK_WEEK_END", "Friday"),
            start_hour=env.get("WORK_DAY_START", "8"),
            end_hour=env.get("WORK_DAY_END", "18"),
            timezone=env.get("BUSINESS_TIMEZONE", "UTC"),
        )
        return cls(
            twilio_account_sid=env.get("TWILIO_ACCOUNT_SID", ""),
            twilio_auth_token=env.get("TWILIO_AUTH_TOKEN", ""),
            twilio_phone_number=env.get("TWILIO_PHONE_NUMBER", ""),
            forward_to_number=env.get("MY_PHONE_NUMBER", ""),
            window=window,
            webhook_host=env.get("WEBHOOK_HOST", "0.0.0.0"),
            webhook_port=_int_setting(env, "WEBHOOK_PORT", "8080"),
            voicemail_max_length=_int_setting(env, "VOICEMAIL_MAX_LENGTH", "300"),
            voicemail_timeout=_int_setting(env, "VOICEMAIL_TIMEOUT", "10"),
        )

    def validate(self) -> list[str]:
        """Validate required configuration. Returns list of missing fields."""
        missing = []
        if not self.twilio_account_sid:
            missing.append("TWILIO_ACCOUNT_SID")
        if not self.twilio_auth_token:
            missing.append("TWILIO_AUTH_TOKEN")
        if not self.twilio_phone_number:
            missing.append("TWILIO_PHONE_NUMBER")
        if not self.forward_to_number:
            missing.append("MY_PHONE_NUMBER")
        return missing


def load_config() -> Config:
    """Load .env once and return the application configuration."""
    load_dotenv()
    return Config.from_env()
