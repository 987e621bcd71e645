from datetime import date
from unittest import mock

import pytest
import requests

from logistics import whatsapp
from logistics.models import Reminder

pytestmark = pytest.mark.django_db


@pytest.fixture
def twilio(settings):
    settings.TWILIO_ACCOUNT_SID = "AC123"
    settings.TWILIO_AUTH_TOKEN = "secret"
    settings.TWILIO_WHATSAPP_NUMBER = "whatsapp:+14155238886"
    with mock.patch("logistics.whatsapp.requests.post") as post:
        post.return_value.json.return_value = {"sid": "SM42"}
        yield post


def reminder_payload(**extra) -> dict:
    payload = {
        "date": "2024-02-14",
        "description": "Collect balance for container CNT24020001",
        "purpose": "Payment follow-up",
    }
    payload.update(extra)
    return payload


def test_format_whatsapp_number() -> None:
    assert whatsapp.format_whatsapp_number("+91 98765-43210") == "whatsapp:+919876543210"
    assert whatsapp.format_whatsapp_number("919876543210") == "whatsapp:+919876543210"


def test_reminder_message() -> None:
    body = whatsapp.reminder_message("Payment follow-up", "Call Ravi", date(2024, 2, 14))

    assert "14 Feb 2024" in body
    assert "Payment follow-up" in body
    assert "Call Ravi" in body


def test_no_whatsapp_no_send(api, twilio) -> None:
    response = api.post("/api/reminders/", reminder_payload(), format="json")

    assert response.status_code == 201
    assert response.json()["message"] == "Reminder created successfully"
    twilio.assert_not_called()


def test_send_on_create(api, twilio) -> None:
    response = api.post(
        "/api/reminders/", reminder_payload(whatsapp=True, whatsapp_number="+91 98765 43210"), format="json"
    )

    assert response.status_code == 201
    assert response.json()["message"] == "Reminder created successfully (WhatsApp notification sent)"
    data = response.json()["data"]
    assert data["whatsapp_sent"] is True
    assert data["whatsapp_message_sid"] == "SM42"

    twilio.assert_called_once()
    args, kwargs = twilio.call_args
    assert args[0] == "https://api.twilio.com/2010-04-01/Accounts/AC123/Messages.json"
    assert kwargs["data"]["To"] == "whatsapp:+919876543210"
    assert kwargs["data"]["From"] == "whatsapp:+14155238886"
    assert kwargs["auth"] == ("AC123", "secret")
    assert "timeout" in kwargs


def test_customer_number_is_fallback(api, twilio, make_receiver) -> None:
    customer = make_receiver(whatsapp_number="+971500000000")

    api.post("/api/reminders/", reminder_payload(whatsapp=True, customer=customer.pk), format="json")

    assert twilio.call_args.kwargs["data"]["To"] == "whatsapp:+971500000000"


def test_failed_send_keeps_reminder(api, twilio) -> None:
    twilio.return_value.raise_for_status.side_effect = requests.HTTPError("401 Unauthorized")

    response = api.post("/api/reminders/", reminder_payload(whatsapp=True, whatsapp_number="+911"), format="json")

    assert response.status_code == 201
    assert response.json()["message"] == "Reminder created successfully (WhatsApp notification failed: 401 Unauthorized)"
    reminder = Reminder.objects.get()
    assert reminder.whatsapp_sent is False
    assert reminder.whatsapp_error == "401 Unauthorized"


def test_unconfigured_twilio(api) -> None:
    response = api.post("/api/reminders/", reminder_payload(whatsapp=True, whatsapp_number="+911"), format="json")

    assert response.status_code == 201
    assert "WhatsApp service is not configured" in response.json()["message"]
    assert Reminder.objects.get().whatsapp_sent is False


def test_no_recipient(api, twilio) -> None:
    response = api.post("/api/reminders/", reminder_payload(whatsapp=True), format="json")

    assert response.status_code == 201
    assert response.json()["data"]["whatsapp_error"] == "No WhatsApp number available for this reminder"
    twilio.assert_not_called()


def test_enabling_whatsapp_on_update_sends(api, twilio) -> None:
    created = api.post("/api/reminders/", reminder_payload(whatsapp_number="+911"), format="json").json()["data"]

    response = api.patch(f"/api/reminders/{created['id']}/", {"whatsapp": True}, format="json")

    assert response.json()["data"]["whatsapp_sent"] is True
    assert twilio.call_count == 1


def test_sent_reminder_is_not_resent_on_edit(api, twilio) -> None:
    created = api.post(
        "/api/reminders/", reminder_payload(whatsapp=True, whatsapp_number="+911"), format="json"
    ).json()["data"]

    response = api.patch(f"/api/reminders/{created['id']}/", {"purpose": "Changed"}, format="json")

    assert response.json()["message"] == "Reminder updated successfully"
    assert twilio.call_count == 1


def test_manual_resend(api, twilio) -> None:
    created = api.post(
        "/api/reminders/", reminder_payload(whatsapp=True, whatsapp_number="+911"), format="json"
    ).json()["data"]

    response = api.post(f"/api/reminders/{created['id']}/send-whatsapp/")

    assert response.status_code == 200
    assert response.json()["message"] == "WhatsApp notification sent"
    assert twilio.call_count == 2


def test_filter_by_whatsapp(api) -> None:
    api.post("/api/reminders/", reminder_payload(), format="json")
    api.post("/api/reminders/", reminder_payload(whatsapp=True, whatsapp_number="+911"), format="json")

    assert api.get("/api/reminders/?whatsapp=true").json()["meta"]["total"] == 1
    assert api.get("/api/reminders/?whatsapp=false").json()["meta"]["total"] == 1
    assert api.get("/api/reminders/?search=balance").json()["meta"]["total"] == 2
