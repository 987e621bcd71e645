from django.core.management.base import BaseCommand

from logistics.models import Booking
from logistics.services import LogisticsError, assign_booking_code


class Command(BaseCommand):
    help = "Assign booking codes to bookings saved without one"

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="list the bookings, change nothing")

    def handle(self, *args, **options):
        missing = Booking.objects.select_related("sender", "receiver").filter(booking_code__isnull=True).order_by("id")
        total = missing.count()
        if not total:
            self.stdout.write("No bookings found without booking codes")
            return

        self.stdout.write(f"Found {total} bookings without booking codes")
        updated = failed = 0
        for booking in missing:
            if options["dry_run"]:
                self.stdout.write(f"  booking #{booking.pk} ({booking.sender.name} -> {booking.receiver.name})")
                continue
            try:
                assign_booking_code(booking)
            except LogisticsError as e:
                failed += 1
                self.stderr.write(f"  booking #{booking.pk}: {e.detail}")
                continue
            updated += 1
            self.stdout.write(f"  booking #{booking.pk} -> {booking.booking_code}")

        if not options["dry_run"]:
            self.stdout.write(self.style.SUCCESS(f"Updated {updated} bookings, {failed} failed"))
