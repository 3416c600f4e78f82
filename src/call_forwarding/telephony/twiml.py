"""TwiML documents returned by the voice webhook."""

from twilio.twiml.voice_response import VoiceResponse


def build_forward_twiml(number: str, unavailable_message: str) -> str:
    """
    Generate TwiML that connects the caller to the forwarding number.

    The <Say> only plays if the <Dial> ends without the call being bridged.
    """
    response = VoiceResponse()
    response.dial(number)
    response.say(unavailable_message)
    return str(response)


def build_voicemail_twiml(
    transcribe_callback: str = "/sms",
    max_length: int = 300,
    timeout: int = 10,
    finish_on_key: str = "#",
) -> str:
    """Generate TwiML that records a transcribed voicemail."""
    response = VoiceResponse()
    response.record(
        finish_on_key=finish_on_key,
        max_length=max_length,
        timeout=timeout,
        transcribe=True,
        transcribe_callback=transcribe_callback,
    )
    return str(response)
