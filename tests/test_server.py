import xml.etree.ElementTree as ET
from datetime import datetime

import pytest
import pytz
from fastapi.testclient import TestClient
from twilio.base.exceptions import TwilioRestException

from call_forwarding.config import Config
from call_forwarding.hours import FixedClock
from call_forwarding.server import SMS_FAILED_MESSAGE, SMS_SENT_MESSAGE, create_app
from call_forwarding.telephony import SmsResult


# --- Mocks ---

class FakeTwilioClient:
    def __init__(self, status="queued", error=None):
        self.status = status
        self.error = error
        self.sent = []

    def send_sms(self, to_number, message):
        if self.error is not None:
            raise self.error
        self.sent.append((to_number, message))
        return SmsResult(sid="SM123", status=self.status)


# --- Fixtures ---

WEDNESDAY_NOON = pytz.utc.localize(datetime(2024, 1, 3, 12, 0))
SATURDAY_NOON = pytz.utc.localize(datetime(2024, 1, 6, 12, 0))


@pytest.fixture
def config():
    return Config.from_env({
        "TWILIO_ACCOUNT_SID": "AC123",
        "TWILIO_AUTH_TOKEN": "secret",
        "TWILIO_PHONE_NUMBER": "+15550000000",
        "MY_PHONE_NUMBER": "+15551111111",
    })


@pytest.fixture
def twilio():
    return FakeTwilioClient()


def make_client(config, now, twilio=None):
    return TestClient(create_app(config, clock=FixedClock(now), twilio_client=twilio))


# --- Tests ---

def test_health(config):
    resp = make_client(config, WEDNESDAY_NOON).get("/")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "service": "call-forwarding"}


def test_call_forwarded_during_business_hours(config):
    resp = make_client(config, WEDNESDAY_NOON).post("/", data={"From": "+15553333333"})

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/xml")
    root = ET.fromstring(resp.text)
    assert root.find("Dial").text == "+15551111111"
    assert root.find("Say").text == "Sorry, I was unable to redirect you. Goodbye."
    assert root.find("Record") is None


def test_call_sent_to_voicemail_outside_business_hours(config):
    resp = make_client(config, SATURDAY_NOON).post("/", data={"From": "+15553333333"})

    assert resp.status_code == 200
    root = ET.fromstring(resp.text)
    assert root.find("Dial") is None
    record = root.find("Record")
    assert record.attrib["transcribeCallback"] == "/sms"
    assert record.attrib["maxLength"] == "300"


def test_voicemail_transcript_relayed(config, twilio):
    client = make_client(config, SATURDAY_NOON, twilio)
    resp = client.post("/sms", data={
        "From": "+15553333333",
        "TranscriptionText": "Please call me back",
        "TranscriptionStatus": "completed",
    })

    assert resp.status_code == 200
    assert resp.text == SMS_SENT_MESSAGE
    assert twilio.sent == [
        ("+15551111111", "Voicemail from +15553333333:\nPlease call me back"),
    ]


def test_relay_reports_failed_status(config):
    twilio = FakeTwilioClient(status="failed")
    resp = make_client(config, SATURDAY_NOON, twilio).post("/sms", data={"TranscriptionText": "hi"})

    assert resp.status_code == 200
    assert resp.text == SMS_FAILED_MESSAGE


def test_relay_with_recording_only(config, twilio):
    resp = make_client(config, SATURDAY_NOON, twilio).post("/sms", data={
        "From": "+15553333333",
        "TranscriptionStatus": "failed",
        "RecordingUrl": "https://api.twilio.com/rec/RE1",
    })

    assert resp.status_code == 200
    assert "Recording: https://api.twilio.com/rec/RE1" in twilio.sent[0][1]


def test_relay_rejects_empty_callback(config, twilio):
    resp = make_client(config, SATURDAY_NOON, twilio).post("/sms", data={"From": "+15553333333"})

    assert resp.status_code == 400
    error = resp.json()["errors"][0]
    assert error["status"] == 400
    assert error["code"] == "400"
    assert error["title"] == "Something went wrong"
    assert twilio.sent == []


def test_relay_reports_twilio_error(config):
    error = TwilioRestException(status=400, uri="/Messages", msg="Invalid 'To' number")
    twilio = FakeTwilioClient(error=error)
    resp = make_client(config, SATURDAY_NOON, twilio).post("/sms", data={"TranscriptionText": "hi"})

    assert resp.status_code == 400
    assert "Invalid 'To' number" in resp.json()["errors"][0]["detail"]


def test_evaluator_follows_configured_window():
    config = Config.from_env({
        "MY_PHONE_NUMBER": "+15551111111",
        "WORK_WEEK_START": "Saturday",
        "WORK_WEEK_END": "Sunday",
    })
    resp = make_client(config, SATURDAY_NOON).post("/", data={})

    assert ET.fromstring(resp.text).find("Dial") is not None


def test_relay_without_credentials_returns_error_document(monkeypatch):
    monkeypatch.delenv("TWILIO_ACCOUNT_SID", raising=False)
    monkeypatch.delenv("TWILIO_AUTH_TOKEN", raising=False)
    config = Config.from_env({"MY_PHONE_NUMBER": "+15551111111"})

    resp = make_client(config, SATURDAY_NOON).post("/sms", data={"TranscriptionText": "hi"})

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["title"] == "Something went wrong"
