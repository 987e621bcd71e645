import django.core.serializers.json
import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.db import migrations, models


def money(**extra):
    return models.DecimalField(max_digits=12, decimal_places=2, **extra)


def non_negative():
    return [django.core.validators.MinValueValidator(0)]


def json_field(**extra):
    return models.JSONField(encoder=django.core.serializers.json.DjangoJSONEncoder, **extra)


def stamps():
    return [
        ("date_created", models.BigIntegerField(blank=True, editable=False, null=True)),
        ("last_modified", models.BigIntegerField(blank=True, editable=False, null=True)),
    ]

ACTIVE_STATUS = [("Active", "Active"), ("Inactive", "Inactive")]
PACKING_STATUS = [("pending", "Pending"), ("in_progress", "In progress"), ("completed", "Completed")]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=stamps() + [
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("customer_type", models.CharField(choices=[("Sender", "Sender"), ("Receiver", "Receiver")], max_length=16)),
                ("name", models.CharField(max_length=255)),
                ("status", models.CharField(choices=ACTIVE_STATUS, default="Active", max_length=16)),
                ("is_active", models.BooleanField(default=True)),
                ("shop_name", models.CharField(blank=True, default="", max_length=255)),
                ("contact_person", models.CharField(blank=True, default="", max_length=255)),
                ("phone", models.CharField(blank=True, default="", max_length=50)),
                ("whatsapp_number", models.CharField(blank=True, default="", max_length=50)),
                ("location", models.CharField(blank=True, default="", max_length=255)),
                ("gst_number", models.CharField(blank=True, default="", max_length=50)),
                ("account_details", json_field(blank=True, null=True)),
                ("branches", json_field(blank=True, default=list)),
                ("credit", money(default=Decimal("0"))),
                ("country", models.CharField(blank=True, default="", max_length=100)),
                ("address", models.CharField(blank=True, default="", max_length=500)),
                ("discount", models.DecimalField(
                    blank=True, decimal_places=2, max_digits=5, null=True,
                    validators=[
                        django.core.validators.MinValueValidator(0),
                        django.core.validators.MaxValueValidator(100),
                    ],
                )),
                ("payment_history", json_field(blank=True, default=list)),
            ],
            options={
                "db_table": "customer",
                "indexes": [
                    models.Index(fields=["customer_type"], name="idx_customer_type"),
                    models.Index(fields=["name"], name="idx_customer_name"),
                    models.Index(fields=["status"], name="idx_customer_status"),
                    models.Index(fields=["date_created"], name="idx_customer_created"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PickupPartner",
            fields=stamps() + [
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("phone_number", models.CharField(max_length=50)),
                ("price", money(validators=non_negative())),
                ("status", models.CharField(choices=ACTIVE_STATUS, default="Active", max_length=16)),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={
                "db_table": "pickup_partner",
                "indexes": [
                    models.Index(fields=["name"], name="idx_pickup_partner_name"),
                    models.Index(fields=["status"], name="idx_pickup_partner_status"),
                ],
            },
        ),
        migrations.CreateModel(
            name="DeliveryPartner",
            fields=stamps() + [
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("phone_number", models.CharField(max_length=50)),
                ("price", money(validators=non_negative())),
                ("from_country", models.CharField(max_length=100)),
                ("to_country", models.CharField(max_length=100)),
                ("status", models.CharField(choices=ACTIVE_STATUS, default="Active", max_length=16)),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={
                "db_table": "delivery_partner",
                "indexes": [
                    models.Index(fields=["name"], name="idx_delivery_partner_name"),
                    models.Index(fields=["from_country", "to_country"], name="idx_delivery_partner_route"),
                    models.Index(fields=["status"], name="idx_delivery_partner_status"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Store",
            fields=stamps() + [
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("code", models.CharField(max_length=50, unique=True)),
                ("manager_role", models.CharField(blank=True, default="", max_length=100)),
                ("phone", models.CharField(blank=True, default="", max_length=50)),
                ("email", models.CharField(blank=True, default="", max_length=255)),
                ("address", models.CharField(blank=True, default="", max_length=500)),
                ("city", models.CharField(blank=True, default="", max_length=100)),
                ("state", models.CharField(blank=True, default="", max_length=100)),
                ("postal_code", models.CharField(blank=True, default="", max_length=20)),
                ("country", models.CharField(blank=True, default="", max_length=100)),
                ("bank_name", models.CharField(blank=True, default="", max_length=255)),
                ("bank_account_number", models.CharField(blank=True, default="", max_length=64)),
                ("ifsc_code", models.CharField(blank=True, default="", max_length=32)),
                ("iban_code", models.CharField(blank=True, default="", max_length=64)),
                ("tax_code", models.CharField(blank=True, default="", max_length=64)),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={
                "db_table": "store",
                "indexes": [models.Index(fields=["name"], name="idx_store_name")],
            },
        ),
        migrations.CreateModel(
            name="Booking",
            fields=stamps() + [
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("booking_code", models.CharField(blank=True, max_length=40, null=True, unique=True)),
                ("sender", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT, related_name="sent_bookings", to="logistics.customer")),
                ("receiver", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT, related_name="received_bookings", to="logistics.customer")),
                ("receiver_branch", models.CharField(blank=True, default="", max_length=255)),
                ("pickup_kind", models.CharField(
                    choices=[("partner", "Partner"), ("self", "Self"), ("central", "Central")],
                    default="partner", max_length=16)),
                ("pickup_partner", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.PROTECT,
                    related_name="bookings", to="logistics.pickuppartner")),
                ("store", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="bookings", to="logistics.store")),
                ("date", models.DateField()),
                ("expected_receiving_date", models.DateField()),
                ("bundle_count", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("status", models.CharField(
                    choices=[("pending", "Pending"), ("success", "Success")], default="pending", max_length=16)),
                ("repacking", models.CharField(
                    choices=[("ready-to-ship", "Ready to ship"), ("repacking-required", "Repacking required")],
                    default="ready-to-ship", max_length=32)),
            ],
            options={
                "db_table": "booking",
                "indexes": [
                    models.Index(fields=["status"], name="idx_booking_status"),
                    models.Index(fields=["date"], name="idx_booking_date"),
                    models.Index(fields=["date_created"], name="idx_booking_created"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(pickup_kind="partner", pickup_partner__isnull=False)
                            | (~models.Q(pickup_kind="partner") & models.Q(pickup_partner__isnull=True))
                        ),
                        name="ck_booking_pickup_variant",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(expected_receiving_date__gt=models.F("date")), name="ck_booking_dates"
                    ),
                    models.CheckConstraint(condition=models.Q(bundle_count__gte=1), name="ck_booking_bundle_count"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Container",
            fields=stamps() + [
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("container_code", models.CharField(max_length=16, unique=True)),
                ("company_name", models.CharField(max_length=255)),
                ("booking_date", models.DateField()),
                ("booking_charge", money(validators=non_negative())),
                ("advance_payment", money(default=Decimal("0"), validators=non_negative())),
                ("balance_amount", money(validators=non_negative())),
                ("status", models.CharField(
                    choices=[("pending", "Pending"), ("confirmed", "Confirmed"),
                             ("completed", "Completed"), ("cancelled", "Cancelled")],
                    default="pending", max_length=16)),
            ],
            options={
                "db_table": "container",
                "indexes": [
                    models.Index(fields=["company_name"], name="idx_container_company"),
                    models.Index(fields=["status"], name="idx_container_status"),
                    models.Index(fields=["booking_date"], name="idx_container_booking_date"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(balance_amount__gte=0), name="ck_container_balance_nonnegative"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PackingList",
            fields=stamps() + [
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("booking_reference", models.OneToOneField(
                    on_delete=django.db.models.deletion.PROTECT, related_name="packing_list", to="logistics.booking")),
                ("packing_list_code", models.CharField(max_length=20, unique=True)),
                ("net_weight", money(validators=non_negative())),
                ("gross_weight", money(validators=non_negative())),
                ("packed_by", models.CharField(max_length=255)),
                ("planned_bundle_count", models.PositiveIntegerField(default=0)),
                ("actual_bundle_count", models.PositiveIntegerField(default=0)),
                ("packing_status", models.CharField(choices=PACKING_STATUS, default="pending", max_length=16)),
            ],
            options={
                "db_table": "packing_list",
                "indexes": [
                    models.Index(fields=["packing_status"], name="idx_packing_list_status"),
                    models.Index(fields=["date_created"], name="idx_packing_list_created"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Bundle",
            fields=stamps() + [
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("packing_list", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="bundles", to="logistics.packinglist")),
                ("bundle_number", models.CharField(max_length=50)),
                ("description", models.CharField(blank=True, default="", max_length=500)),
                ("quantity", money(validators=non_negative())),
                ("net_weight", money(blank=True, null=True, validators=non_negative())),
                ("gross_weight", money(blank=True, null=True, validators=non_negative())),
                ("actual_count", models.PositiveIntegerField(blank=True, null=True)),
                ("status", models.CharField(choices=PACKING_STATUS, default="pending", max_length=16)),
                ("products", json_field(blank=True, default=list)),
                ("priority", models.CharField(
                    choices=[("high", "High"), ("medium", "Medium"), ("low", "Low")], default="medium", max_length=8)),
                ("ready_to_ship_status", models.CharField(
                    choices=[("pending", "Pending"), ("stuffed", "Stuffed"), ("dispatched", "Dispatched")],
                    default="pending", max_length=16)),
                ("container", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="bundles", to="logistics.container")),
            ],
            options={
                "db_table": "bundle",
                "indexes": [
                    models.Index(fields=["status"], name="idx_bundle_status"),
                    models.Index(fields=["ready_to_ship_status"], name="idx_bundle_rts_status"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=["packing_list", "bundle_number"], name="uq_bundle_packing_list_number"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PickupAssign",
            fields=stamps() + [
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("transport_partner", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT, related_name="pickup_assignments",
                    to="logistics.pickuppartner")),
                ("lr_numbers", json_field(default=list)),
                ("assign_date", models.DateField()),
                ("status", models.CharField(
                    choices=[("Pending", "Pending"), ("Completed", "Completed")], default="Pending", max_length=16)),
            ],
            options={
                "db_table": "pickup_assign",
                "indexes": [
                    models.Index(fields=["assign_date"], name="idx_pickup_assign_date"),
                    models.Index(fields=["status"], name="idx_pickup_assign_status"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PriceListing",
            fields=stamps() + [
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("from_country", models.CharField(default="India", max_length=100)),
                ("to_country", models.CharField(max_length=100)),
                ("delivery_partner", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.PROTECT,
                    related_name="price_listings", to="logistics.deliverypartner")),
                ("amount", money(validators=non_negative())),
                ("total_amount", money(validators=non_negative())),
                ("status", models.CharField(choices=ACTIVE_STATUS, default="Active", max_length=16)),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={
                "db_table": "price_listing",
                "indexes": [
                    models.Index(fields=["from_country", "to_country"], name="idx_price_listing_route"),
                    models.Index(fields=["status"], name="idx_price_listing_status"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Reminder",
            fields=stamps() + [
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("date", models.DateField()),
                ("description", models.CharField(max_length=500)),
                ("purpose", models.CharField(max_length=200)),
                ("whatsapp", models.BooleanField(default=False)),
                ("customer", models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="reminders", to="logistics.customer")),
                ("whatsapp_number", models.CharField(blank=True, default="", max_length=50)),
                ("whatsapp_sent", models.BooleanField(default=False)),
                ("whatsapp_sent_at", models.DateTimeField(blank=True, null=True)),
                ("whatsapp_error", models.TextField(blank=True, default="")),
                ("whatsapp_message_sid", models.CharField(blank=True, default="", max_length=64)),
            ],
            options={
                "db_table": "reminder",
                "indexes": [
                    models.Index(fields=["date"], name="idx_reminder_date"),
                    models.Index(fields=["whatsapp"], name="idx_reminder_whatsapp"),
                ],
            },
        ),
    ]
