import logging
import re
from dataclasses import dataclass
from typing import Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


@dataclass
class SendResult:
    success: bool
    sid: Optional[str] = None
    error: Optional[str] = None


def is_configured() -> bool:
    return bool(settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN and settings.TWILIO_WHATSAPP_NUMBER)


def format_whatsapp_number(phone_number: str) -> str:
    """
    "+91 98765-43210" -> "whatsapp:+919876543210"
    """
    cleaned = re.sub(r"[^\d+]", "", phone_number or "")
    if not cleaned.startswith("+"):
        cleaned = "+" + cleaned
    return "whatsapp:" + cleaned


def reminder_message(purpose: str, description: str, date) -> str:
    return (
        "🔔 *Reminder Notification*\n\n"
        f"📅 *Date:* {date:%d %b %Y}\n"
        f"🎯 *Purpose:* {purpose}\n"
        f"📝 *Details:* {description}\n\n"
        "This is an automated reminder from your system."
    )


def send_message(to_number: str, body: str) -> SendResult:
    if not is_configured():
        logger.warning("[WhatsApp] Twilio credentials are not configured, message not sent.")
        return SendResult(False, error="WhatsApp service is not configured. Please set up Twilio credentials.")

    sid = settings.TWILIO_ACCOUNT_SID
    url = f"{settings.TWILIO_API_URL.rstrip('/')}/Accounts/{sid}/Messages.json"
    sender = settings.TWILIO_WHATSAPP_NUMBER
    if not sender.startswith("whatsapp:"):
        sender = format_whatsapp_number(sender)
    payload = {"From": sender, "To": format_whatsapp_number(to_number), "Body": body}

    logger.info(f"[WhatsApp] Sending message to {payload['To']}")
    try:
        response = requests.post(
            url, data=payload, auth=(sid, settings.TWILIO_AUTH_TOKEN), timeout=settings.TWILIO_TIMEOUT
        )
        response.raise_for_status()
        message_sid = response.json().get("sid")
    except requests.RequestException as e:
        logger.error(f"[WhatsApp] Failed to send message to {payload['To']}: {e}")
        if getattr(e, "response", None) is not None:
            logger.error(f"[WhatsApp] Twilio API Response: {e.response.text}")
        return SendResult(False, error=str(e))
    except ValueError as e:
        logger.error(f"[WhatsApp] Could not parse Twilio response: {e}")
        return SendResult(False, error="Invalid response from WhatsApp provider")

    logger.info(f"[WhatsApp] Message sent, sid={message_sid}")
    return SendResult(True, sid=message_sid)


def send_reminder_message(to_number: str, purpose: str, description: str, date) -> SendResult:
    return send_message(to_number, reminder_message(purpose, description, date))
