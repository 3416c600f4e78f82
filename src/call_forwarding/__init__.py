"""
Call Forwarding Package

Twilio webhook service that forwards inbound calls during business hours
and relays voicemail transcripts by SMS otherwise.

Components:
- hours: Weekly business-hours window and clock
- telephony: TwiML builders and Twilio SMS client
- server: FastAPI webhook endpoints
- cli: Server and diagnostics commands
"""

from .config import Config, load_config
from .errors import ConfigurationError

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ConfigurationError",
    "load_config",
]
