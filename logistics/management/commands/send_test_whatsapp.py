from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from logistics import whatsapp


def _masked(value: str) -> str:
    return f"{value[:10]}..." if value else "MISSING"


class Command(BaseCommand):
    help = "Check the Twilio settings and send one WhatsApp test message"

    def add_arguments(self, parser):
        parser.add_argument("number", help="recipient, e.g. +919876543210")
        parser.add_argument("--message", default="Test message from the forwarding back office.")

    def handle(self, *args, **options):
        self.stdout.write(f"Account SID:     {_masked(settings.TWILIO_ACCOUNT_SID)}")
        self.stdout.write(f"Auth token:      {_masked(settings.TWILIO_AUTH_TOKEN)}")
        self.stdout.write(f"WhatsApp number: {settings.TWILIO_WHATSAPP_NUMBER or 'MISSING'}")

        if not whatsapp.is_configured():
            raise CommandError("Twilio credentials are missing, set TWILIO_ACCOUNT_SID, "
                               "TWILIO_AUTH_TOKEN and TWILIO_WHATSAPP_NUMBER in .env")

        result = whatsapp.send_message(options["number"], options["message"])
        if not result.success:
            raise CommandError(f"Send failed: {result.error}")
        self.stdout.write(self.style.SUCCESS(f"Message sent, sid={result.sid}"))
