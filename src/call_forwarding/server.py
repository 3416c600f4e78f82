"""
Call Forwarding Server

FastAPI server for handling Twilio voice and transcription webhooks.
Forwards calls during business hours; otherwise records a voicemail and
texts its transcript to the forwarding number.
"""

from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from twilio.base.exceptions import TwilioException, TwilioRestException

from .config import Config, load_config
from .hours.business_hours import BusinessHoursEvaluator
from .hours.clock import Clock
from .telephony.twilio_client import TwilioClient, format_voicemail_sms
from .telephony.twiml import build_forward_twiml, build_voicemail_twiml

SMS_SENT_MESSAGE = "The SMS with the voice recording transcript was sent successfully."
SMS_FAILED_MESSAGE = "Something went wrong sending the SMS with the voice recording transcript."

TRANSCRIBE_CALLBACK_PATH = "/sms"


def app_error(detail: str, status_code: int = 400) -> JSONResponse:
    """Build an error response in the JSON:API errors shape."""
    return JSONResponse(
        status_code=status_code,
        content={
            "errors": [
                {
                    "status": status_code,
                    "code": str(status_code),
                    "title": "Something went wrong",
                    "detail": detail,
                }
            ]
        },
    )


def create_app(
    config: Optional[Config] = None,
    clock: Optional[Clock] = None,
    twilio_client: Optional[TwilioClient] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Configuration is loaded (and the business-hours window validated) here,
    so a malformed window aborts startup with ConfigurationError.
    """
    if config is None:
        config = load_config()

    app = FastAPI(title="Call Forwarding", description="Business-hours call forwarding with voicemail relay")
    evaluator = BusinessHoursEvaluator(config.window, clock)
    print(f"[Config] Business hours: {evaluator.describe()}", flush=True)

    # Created on first use so the voice webhook works without Twilio credentials
    clients: dict[str, TwilioClient] = {}
    if twilio_client is not None:
        clients["sms"] = twilio_client

    def get_twilio_client() -> TwilioClient:
        if "sms" not in clients:
            clients["sms"] = TwilioClient(config)
        return clients["sms"]

    app.state.config = config
    app.state.evaluator = evaluator

    @app.get("/")
    async def health():
        """Health check endpoint."""
        return {"status": "ok", "service": "call-forwarding"}

    @app.post("/")
    async def handle_call(request: Request):
        """
        Handle an inbound call webhook.

        During business hours the call is dialed through to the forwarding
        number. Otherwise the caller is asked to leave a voicemail, which
        Twilio transcribes and posts to /sms.
        """
        form = await request.form()
        caller = form.get("From", "")

        if evaluator.is_open():
            print(f"[Server] Forwarding call from {caller or 'unknown'}", flush=True)
            twiml = build_forward_twiml(config.forward_to_number, config.unavailable_message)
        else:
            print(f"[Server] Outside business hours, recording voicemail from {caller or 'unknown'}", flush=True)
            twiml = build_voicemail_twiml(
                transcribe_callback=TRANSCRIBE_CALLBACK_PATH,
                max_length=config.voicemail_max_length,
                timeout=config.voicemail_timeout,
                finish_on_key=config.voicemail_finish_on_key,
            )

        return Response(content=twiml, media_type="application/xml")

    @app.post(TRANSCRIBE_CALLBACK_PATH)
    async def relay_voicemail(request: Request):
        """
        Handle the transcription callback.

        Texts the voicemail transcript (and recording link) to the
        forwarding number.
        """
        form = await request.form()
        caller = form.get("From")
        transcript = form.get("TranscriptionText")
        recording_url = form.get("RecordingUrl")

        if not transcript and not recording_url:
            return app_error("Callback carried neither TranscriptionText nor RecordingUrl")

        body = format_voicemail_sms(caller, transcript, recording_url)
        try:
            result = get_twilio_client().send_sms(config.forward_to_number, body)
        except TwilioRestException as e:
            print(f"[SMS] Error sending SMS message: {e}", flush=True)
            return app_error(f"Could not send the voice recording transcript. Reason: {e.msg}")
        except TwilioException as e:
            # Raised before any request is made, e.g. missing credentials
            print(f"[SMS] Twilio client error: {e}", flush=True)
            return app_error(f"Could not send the voice recording transcript. Reason: {e}")

        if not result.delivered_ok:
            print(f"[SMS] Message {result.sid} status: {result.status}", flush=True)
            return PlainTextResponse(SMS_FAILED_MESSAGE)

        print(f"[SMS] Sent transcript as {result.sid}", flush=True)
        return PlainTextResponse(SMS_SENT_MESSAGE)

    return app
