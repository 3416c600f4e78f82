"""
Twilio Client for Call Forwarding

Relays voicemail transcripts over SMS using Twilio's Messaging API.
"""

from dataclasses import dataclass
from typing import Optional

from twilio.rest import Client

from ..config import Config

# Message statuses that mean the SMS will not arrive
FAILED_STATUSES = frozenset({"cancelled", "failed", "undelivered"})


@dataclass
class SmsResult:
    """Outcome of a message create request."""
    sid: str
    status: Optional[str]

    @property
    def delivered_ok(self) -> bool:
        return self.status not in FAILED_STATUSES


class TwilioClient:
    """Client for sending SMS via Twilio."""

    def __init__(self, config: Config):
        self.config = config
        self.client = Client(config.twilio_account_sid, config.twilio_auth_token)
        self.from_number = config.twilio_phone_number

    def send_sms(self, to_number: str, message: str) -> SmsResult:
        """
        Send an SMS message.

        Args:
            to_number: Phone number to send to (E.164 format: +14035551234)
            message: The message text to send

        Returns:
            SmsResult with the message SID and its initial status

        Raises:
            twilio.base.exceptions.TwilioRestException: if Twilio rejects the request
        """
        msg = self.client.messages.create(
            to=to_number,
            from_=self.from_number,
            body=message
        )
        return SmsResult(sid=msg.sid, status=msg.status)


def format_voicemail_sms(
    caller: Optional[str],
    transcript: Optional[str],
    recording_url: Optional[str] = None,
) -> str:
    """Build the SMS body for a voicemail, with the recording link if known."""
    lines = [f"Voicemail from {caller or 'unknown caller'}:"]
    if transcript:
        lines.append(transcript)
    else:
        lines.append("(no transcript available)")
    if recording_url:
        lines.append(f"Recording: {recording_url}")
    return "\n".join(lines)
