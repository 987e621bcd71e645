import time
from decimal import Decimal

from django.core.serializers.json import DjangoJSONEncoder
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import F, Q


class TimeStamped(models.Model):
    """unix-second stamps, refreshed on every save."""
    date_created = models.BigIntegerField(editable=False, null=True, blank=True)
    last_modified = models.BigIntegerField(editable=False, null=True, blank=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        # always use current UTC time in seconds
        now = int(time.time())
        self.last_modified = now
        # if new object, set date_created too
        if not self.date_created:
            self.date_created = now
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = set(update_fields) | {"last_modified"}
        return super().save(*args, **kwargs)


ACTIVE = "Active"
INACTIVE = "Inactive"
ACTIVE_STATUS_CHOICES = [(ACTIVE, "Active"), (INACTIVE, "Inactive")]

MONEY = dict(max_digits=12, decimal_places=2)


class Customer(TimeStamped):
    SENDER = "Sender"
    RECEIVER = "Receiver"
    TYPE_CHOICES = [(SENDER, "Sender"), (RECEIVER, "Receiver")]

    # fields that only mean something for one customer type
    SENDER_FIELDS = ("location", "gst_number", "account_details")
    RECEIVER_FIELDS = ("branches", "credit", "country", "address", "discount", "payment_history")

    id = models.BigAutoField(primary_key=True)
    customer_type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    name = models.CharField(max_length=255)
    status = models.CharField(max_length=16, choices=ACTIVE_STATUS_CHOICES, default=ACTIVE)
    is_active = models.BooleanField(default=True)

    # common
    shop_name = models.CharField(max_length=255, blank=True, default="")
    contact_person = models.CharField(max_length=255, blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    whatsapp_number = models.CharField(max_length=50, blank=True, default="")

    # sender
    location = models.CharField(max_length=255, blank=True, default="")
    gst_number = models.CharField(max_length=50, blank=True, default="")
    account_details = models.JSONField(encoder=DjangoJSONEncoder, null=True, blank=True)

    # receiver
    branches = models.JSONField(encoder=DjangoJSONEncoder, default=list, blank=True)
    credit = models.DecimalField(default=Decimal("0"), **MONEY)
    country = models.CharField(max_length=100, blank=True, default="")
    address = models.CharField(max_length=500, blank=True, default="")
    discount = models.DecimalField(
        max_digits=5, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    payment_history = models.JSONField(encoder=DjangoJSONEncoder, default=list, blank=True)

    class Meta:
        db_table = "customer"
        indexes = [
            models.Index(fields=["customer_type"], name="idx_customer_type"),
            models.Index(fields=["name"], name="idx_customer_name"),
            models.Index(fields=["status"], name="idx_customer_status"),
            models.Index(fields=["date_created"], name="idx_customer_created"),
        ]

    def __str__(self):
        return f"{self.name} ({self.customer_type})"

    def branch_names(self) -> list[str]:
        return [b.get("branch_name") for b in (self.branches or []) if isinstance(b, dict)]


class PickupPartner(TimeStamped):
    id = models.BigAutoField(primary_key=True)
    name = models.CharField(max_length=255)
    phone_number = models.CharField(max_length=50)
    price = models.DecimalField(validators=[MinValueValidator(0)], **MONEY)
    status = models.CharField(max_length=16, choices=ACTIVE_STATUS_CHOICES, default=ACTIVE)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "pickup_partner"
        indexes = [
            models.Index(fields=["name"], name="idx_pickup_partner_name"),
            models.Index(fields=["status"], name="idx_pickup_partner_status"),
        ]

    def __str__(self):
        return self.name


class DeliveryPartner(TimeStamped):
    id = models.BigAutoField(primary_key=True)
    name = models.CharField(max_length=255)
    phone_number = models.CharField(max_length=50)
    price = models.DecimalField(validators=[MinValueValidator(0)], **MONEY)
    from_country = models.CharField(max_length=100)
    to_country = models.CharField(max_length=100)
    status = models.CharField(max_length=16, choices=ACTIVE_STATUS_CHOICES, default=ACTIVE)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "delivery_partner"
        indexes = [
            models.Index(fields=["name"], name="idx_delivery_partner_name"),
            models.Index(fields=["from_country", "to_country"], name="idx_delivery_partner_route"),
            models.Index(fields=["status"], name="idx_delivery_partner_status"),
        ]

    def __str__(self):
        return self.name


class Store(TimeStamped):
    id = models.BigAutoField(primary_key=True)
    name = models.CharField(max_length=255)
    code = models.CharField(max_length=50, unique=True)
    manager_role = models.CharField(max_length=100, blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    email = models.CharField(max_length=255, blank=True, default="")
    address = models.CharField(max_length=500, blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")
    state = models.CharField(max_length=100, blank=True, default="")
    postal_code = models.CharField(max_length=20, blank=True, default="")
    country = models.CharField(max_length=100, blank=True, default="")
    bank_name = models.CharField(max_length=255, blank=True, default="")
    bank_account_number = models.CharField(max_length=64, blank=True, default="")
    ifsc_code = models.CharField(max_length=32, blank=True, default="")
    iban_code = models.CharField(max_length=64, blank=True, default="")
    tax_code = models.CharField(max_length=64, blank=True, default="")
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "store"
        indexes = [models.Index(fields=["name"], name="idx_store_name")]

    def __str__(self):
        return f"{self.code} {self.name}"


class Booking(TimeStamped):
    PENDING = "pending"
    SUCCESS = "success"
    STATUS_CHOICES = [(PENDING, "Pending"), (SUCCESS, "Success")]

    # pickup route: an external partner row, or one of two in-house routes
    PICKUP_PARTNER = "partner"
    PICKUP_SELF = "self"
    PICKUP_CENTRAL = "central"
    PICKUP_KINDS = [(PICKUP_PARTNER, "Partner"), (PICKUP_SELF, "Self"), (PICKUP_CENTRAL, "Central")]
    PICKUP_SENTINELS = {"Self": PICKUP_SELF, "Central": PICKUP_CENTRAL}

    READY_TO_SHIP = "ready-to-ship"
    REPACKING_REQUIRED = "repacking-required"
    REPACKING_CHOICES = [(READY_TO_SHIP, "Ready to ship"), (REPACKING_REQUIRED, "Repacking required")]

    id = models.BigAutoField(primary_key=True)
    booking_code = models.CharField(max_length=40, unique=True, null=True, blank=True)
    sender = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name="sent_bookings")
    receiver = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name="received_bookings")
    receiver_branch = models.CharField(max_length=255, blank=True, default="")
    pickup_kind = models.CharField(max_length=16, choices=PICKUP_KINDS, default=PICKUP_PARTNER)
    pickup_partner = models.ForeignKey(
        PickupPartner, on_delete=models.PROTECT, null=True, blank=True, related_name="bookings"
    )
    store = models.ForeignKey(Store, on_delete=models.SET_NULL, null=True, blank=True, related_name="bookings")
    date = models.DateField()
    expected_receiving_date = models.DateField()
    bundle_count = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=PENDING)
    repacking = models.CharField(max_length=32, choices=REPACKING_CHOICES, default=READY_TO_SHIP)

    class Meta:
        db_table = "booking"
        indexes = [
            models.Index(fields=["status"], name="idx_booking_status"),
            models.Index(fields=["date"], name="idx_booking_date"),
            models.Index(fields=["date_created"], name="idx_booking_created"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(pickup_kind="partner", pickup_partner__isnull=False)
                    | (~Q(pickup_kind="partner") & Q(pickup_partner__isnull=True))
                ),
                name="ck_booking_pickup_variant",
            ),
            models.CheckConstraint(
                condition=Q(expected_receiving_date__gt=F("date")), name="ck_booking_dates"
            ),
            models.CheckConstraint(condition=Q(bundle_count__gte=1), name="ck_booking_bundle_count"),
        ]

    def __str__(self):
        return self.booking_code or f"Booking #{self.pk}"

    @property
    def pickup_label(self) -> str | None:
        """"Self"/"Central" for in-house routes, the partner name otherwise."""
        for label, kind in self.PICKUP_SENTINELS.items():
            if self.pickup_kind == kind:
                return label
        return self.pickup_partner.name if self.pickup_partner_id else None


class Container(TimeStamped):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    STATUS_CHOICES = [
        (PENDING, "Pending"), (CONFIRMED, "Confirmed"),
        (COMPLETED, "Completed"), (CANCELLED, "Cancelled"),
    ]

    id = models.BigAutoField(primary_key=True)
    container_code = models.CharField(max_length=16, unique=True)
    company_name = models.CharField(max_length=255)
    booking_date = models.DateField()
    booking_charge = models.DecimalField(validators=[MinValueValidator(0)], **MONEY)
    advance_payment = models.DecimalField(default=Decimal("0"), validators=[MinValueValidator(0)], **MONEY)
    balance_amount = models.DecimalField(validators=[MinValueValidator(0)], **MONEY)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=PENDING)

    class Meta:
        db_table = "container"
        indexes = [
            models.Index(fields=["company_name"], name="idx_container_company"),
            models.Index(fields=["status"], name="idx_container_status"),
            models.Index(fields=["booking_date"], name="idx_container_booking_date"),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(balance_amount__gte=0), name="ck_container_balance_nonnegative"),
        ]

    def __str__(self):
        return self.container_code

    @staticmethod
    def balance_for(booking_charge, advance_payment) -> Decimal:
        return Decimal(str(booking_charge or 0)) - Decimal(str(advance_payment or 0))

    def save(self, *args, **kwargs):
        self.balance_amount = self.balance_for(self.booking_charge, self.advance_payment)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = set(update_fields) | {"balance_amount"}
        return super().save(*args, **kwargs)


PACKING_PENDING = "pending"
PACKING_IN_PROGRESS = "in_progress"
PACKING_COMPLETED = "completed"
PACKING_STATUS_CHOICES = [
    (PACKING_PENDING, "Pending"),
    (PACKING_IN_PROGRESS, "In progress"),
    (PACKING_COMPLETED, "Completed"),
]


class PackingList(TimeStamped):
    id = models.BigAutoField(primary_key=True)
    booking_reference = models.OneToOneField(Booking, on_delete=models.PROTECT, related_name="packing_list")
    packing_list_code = models.CharField(max_length=20, unique=True)
    net_weight = models.DecimalField(validators=[MinValueValidator(0)], **MONEY)
    gross_weight = models.DecimalField(validators=[MinValueValidator(0)], **MONEY)
    packed_by = models.CharField(max_length=255)
    planned_bundle_count = models.PositiveIntegerField(default=0)
    actual_bundle_count = models.PositiveIntegerField(default=0)
    packing_status = models.CharField(max_length=16, choices=PACKING_STATUS_CHOICES, default=PACKING_PENDING)

    class Meta:
        db_table = "packing_list"
        indexes = [
            models.Index(fields=["packing_status"], name="idx_packing_list_status"),
            models.Index(fields=["date_created"], name="idx_packing_list_created"),
        ]

    def __str__(self):
        return self.packing_list_code


class Bundle(TimeStamped):
    PRIORITY_CHOICES = [("high", "High"), ("medium", "Medium"), ("low", "Low")]

    RTS_PENDING = "pending"
    RTS_STUFFED = "stuffed"
    RTS_DISPATCHED = "dispatched"
    RTS_CHOICES = [(RTS_PENDING, "Pending"), (RTS_STUFFED, "Stuffed"), (RTS_DISPATCHED, "Dispatched")]
    # ready-to-ship states in which a bundle sits in a container
    LOADED_STATES = (RTS_STUFFED, RTS_DISPATCHED)

    id = models.BigAutoField(primary_key=True)
    packing_list = models.ForeignKey(PackingList, on_delete=models.CASCADE, related_name="bundles")
    bundle_number = models.CharField(max_length=50)
    description = models.CharField(max_length=500, blank=True, default="")
    quantity = models.DecimalField(validators=[MinValueValidator(0)], **MONEY)
    net_weight = models.DecimalField(null=True, blank=True, validators=[MinValueValidator(0)], **MONEY)
    gross_weight = models.DecimalField(null=True, blank=True, validators=[MinValueValidator(0)], **MONEY)
    actual_count = models.PositiveIntegerField(null=True, blank=True)
    status = models.CharField(max_length=16, choices=PACKING_STATUS_CHOICES, default=PACKING_PENDING)
    products = models.JSONField(encoder=DjangoJSONEncoder, default=list, blank=True)
    priority = models.CharField(max_length=8, choices=PRIORITY_CHOICES, default="medium")
    ready_to_ship_status = models.CharField(max_length=16, choices=RTS_CHOICES, default=RTS_PENDING)
    container = models.ForeignKey(
        Container, on_delete=models.SET_NULL, null=True, blank=True, related_name="bundles"
    )

    class Meta:
        db_table = "bundle"
        indexes = [
            models.Index(fields=["status"], name="idx_bundle_status"),
            models.Index(fields=["ready_to_ship_status"], name="idx_bundle_rts_status"),
        ]
        constraints = [
            models.UniqueConstraint(fields=["packing_list", "bundle_number"], name="uq_bundle_packing_list_number"),
        ]

    def __str__(self):
        return f"{self.packing_list_id}/{self.bundle_number}"


class PickupAssign(TimeStamped):
    LR_COLLECTED = "Collected"
    LR_NOT_COLLECTED = "Not Collected"
    LR_STATUSES = (LR_COLLECTED, LR_NOT_COLLECTED)

    STATUS_CHOICES = [("Pending", "Pending"), ("Completed", "Completed")]

    id = models.BigAutoField(primary_key=True)
    transport_partner = models.ForeignKey(
        PickupPartner, on_delete=models.PROTECT, related_name="pickup_assignments"
    )
    lr_numbers = models.JSONField(encoder=DjangoJSONEncoder, default=list)
    assign_date = models.DateField()
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default="Pending")

    class Meta:
        db_table = "pickup_assign"
        indexes = [
            models.Index(fields=["assign_date"], name="idx_pickup_assign_date"),
            models.Index(fields=["status"], name="idx_pickup_assign_status"),
        ]


class PriceListing(TimeStamped):
    id = models.BigAutoField(primary_key=True)
    from_country = models.CharField(max_length=100, default="India")
    to_country = models.CharField(max_length=100)
    delivery_partner = models.ForeignKey(
        DeliveryPartner, on_delete=models.PROTECT, null=True, blank=True, related_name="price_listings"
    )
    amount = models.DecimalField(validators=[MinValueValidator(0)], **MONEY)
    total_amount = models.DecimalField(validators=[MinValueValidator(0)], **MONEY)
    status = models.CharField(max_length=16, choices=ACTIVE_STATUS_CHOICES, default=ACTIVE)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "price_listing"
        indexes = [
            models.Index(fields=["from_country", "to_country"], name="idx_price_listing_route"),
            models.Index(fields=["status"], name="idx_price_listing_status"),
        ]


class Reminder(TimeStamped):
    id = models.BigAutoField(primary_key=True)
    date = models.DateField()
    description = models.CharField(max_length=500)
    purpose = models.CharField(max_length=200)
    whatsapp = models.BooleanField(default=False)
    customer = models.ForeignKey(
        Customer, on_delete=models.SET_NULL, null=True, blank=True, related_name="reminders"
    )
    whatsapp_number = models.CharField(max_length=50, blank=True, default="")

    # delivery tracking
    whatsapp_sent = models.BooleanField(default=False)
    whatsapp_sent_at = models.DateTimeField(null=True, blank=True)
    whatsapp_error = models.TextField(blank=True, default="")
    whatsapp_message_sid = models.CharField(max_length=64, blank=True, default="")

    class Meta:
        db_table = "reminder"
        indexes = [
            models.Index(fields=["date"], name="idx_reminder_date"),
            models.Index(fields=["whatsapp"], name="idx_reminder_whatsapp"),
        ]
