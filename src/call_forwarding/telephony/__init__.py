"""
Telephony Package

Twilio integration for forwarding calls and relaying voicemail.
"""

from .twilio_client import TwilioClient, SmsResult, format_voicemail_sms
from .twiml import build_forward_twiml, build_voicemail_twiml

__all__ = [
    "TwilioClient",
    "SmsResult",
    "format_voicemail_sms",
    "build_forward_twiml",
    "build_voicemail_twiml",
]
