"""Error types."""


class ConfigurationError(ValueError):
    """Raised when the business-hours or Twilio configuration is malformed."""
