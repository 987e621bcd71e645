# logistics/serializers.py

from rest_framework import serializers

from .models import (
    Booking, Bundle, Container, Customer, DeliveryPartner, PackingList,
    PickupAssign, PickupPartner, PriceListing, Reminder, Store,
    ACTIVE_STATUS_CHOICES, PACKING_STATUS_CHOICES,
)

STAMPS = ["date_created", "last_modified"]


# ============ Customers ============
class BranchSerializer(serializers.Serializer):
    branch_name = serializers.CharField()
    location = serializers.CharField(required=False, allow_blank=True)
    phone = serializers.CharField(required=False, allow_blank=True)
    contact_person = serializers.CharField(required=False, allow_blank=True)


class AccountDetailsSerializer(serializers.Serializer):
    account_number = serializers.CharField(required=False, allow_blank=True)
    ifsc_code = serializers.CharField(required=False, allow_blank=True)
    iban_code = serializers.CharField(required=False, allow_blank=True)
    bank_name = serializers.CharField(required=False, allow_blank=True)
    account_holder_name = serializers.CharField(required=False, allow_blank=True)
    swift_code = serializers.CharField(required=False, allow_blank=True)


class PaymentSerializer(serializers.Serializer):
    date = serializers.DateField()
    amount = serializers.FloatField(min_value=0)
    payment_method = serializers.CharField(required=False, allow_blank=True)
    reference = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class CustomerSerializer(serializers.ModelSerializer):
    branches = BranchSerializer(many=True, required=False)
    account_details = AccountDetailsSerializer(required=False, allow_null=True)
    payment_history = PaymentSerializer(many=True, required=False)

    class Meta:
        model = Customer
        fields = [
            "id", "customer_type", "name", "status", "is_active",
            "shop_name", "contact_person", "phone", "whatsapp_number",
            "location", "gst_number", "account_details",
            "branches", "credit", "country", "address", "discount", "payment_history",
        ] + STAMPS
        read_only_fields = STAMPS


class CustomerBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ["id", "name", "customer_type", "phone", "location", "country"]


# ============ Partners & stores ============
class PickupPartnerSerializer(serializers.ModelSerializer):
    class Meta:
        model = PickupPartner
        fields = ["id", "name", "phone_number", "price", "status", "is_active"] + STAMPS
        read_only_fields = STAMPS


class PickupPartnerBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = PickupPartner
        fields = ["id", "name", "phone_number", "price"]


class DeliveryPartnerSerializer(serializers.ModelSerializer):
    class Meta:
        model = DeliveryPartner
        fields = [
            "id", "name", "phone_number", "price", "from_country", "to_country", "status", "is_active",
        ] + STAMPS
        read_only_fields = STAMPS


class DeliveryPartnerBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = DeliveryPartner
        fields = ["id", "name", "phone_number", "price", "from_country", "to_country"]


class StoreSerializer(serializers.ModelSerializer):
    class Meta:
        model = Store
        fields = [
            "id", "name", "code", "manager_role", "phone", "email",
            "address", "city", "state", "postal_code", "country",
            "bank_name", "bank_account_number", "ifsc_code", "iban_code", "tax_code",
            "is_active",
        ] + STAMPS
        read_only_fields = STAMPS
        # duplicate codes are reported as 409 by the service layer
        extra_kwargs = {"code": {"validators": []}}


class StoreBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Store
        fields = ["id", "name", "code", "country"]


# ============ Bookings ============
class BookingSerializer(serializers.ModelSerializer):
    sender = CustomerBriefSerializer(read_only=True)
    receiver = CustomerBriefSerializer(read_only=True)
    pickup_partner = serializers.SerializerMethodField()
    store = StoreBriefSerializer(read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id", "booking_code", "sender", "receiver", "receiver_branch",
            "pickup_kind", "pickup_partner", "store",
            "date", "expected_receiving_date", "bundle_count", "status", "repacking",
        ] + STAMPS

    def get_pickup_partner(self, obj):
        # "Self" / "Central" go out as plain strings, partners as objects
        if obj.pickup_kind != Booking.PICKUP_PARTNER:
            return obj.pickup_label
        if obj.pickup_partner_id is None:
            return None
        return PickupPartnerBriefSerializer(obj.pickup_partner).data


class BookingWriteSerializer(serializers.Serializer):
    sender = serializers.IntegerField()
    receiver = serializers.IntegerField()
    receiver_branch = serializers.CharField(required=False, allow_blank=True)
    pickup_partner = serializers.CharField()      # partner id, "Self" or "Central"
    store = serializers.IntegerField(required=False, allow_null=True)
    date = serializers.DateField()
    expected_receiving_date = serializers.DateField()
    bundle_count = serializers.IntegerField()
    status = serializers.ChoiceField(choices=Booking.STATUS_CHOICES, required=False)
    repacking = serializers.ChoiceField(
        choices=Booking.REPACKING_CHOICES, required=False,
        error_messages={"invalid_choice": 'Invalid repacking status. Must be "ready-to-ship" or "repacking-required"'},
    )


class BookingBriefSerializer(serializers.ModelSerializer):
    sender = serializers.CharField(source="sender.name", read_only=True)
    receiver = serializers.CharField(source="receiver.name", read_only=True)
    pickup_partner = serializers.CharField(source="pickup_label", read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id", "booking_code", "sender", "receiver", "pickup_partner",
            "date", "expected_receiving_date", "bundle_count", "status", "repacking",
        ]


# ============ Containers ============
class ContainerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Container
        fields = [
            "id", "container_code", "company_name", "booking_date",
            "booking_charge", "advance_payment", "balance_amount", "status",
        ] + STAMPS
        read_only_fields = ["container_code", "balance_amount"] + STAMPS


class ContainerBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Container
        fields = ["id", "container_code"]


# ============ Bundles ============
class BundleContentSerializer(serializers.Serializer):
    """fields editable from the bundle screens and from ready-to-ship"""
    bundle_number = serializers.CharField(max_length=50)
    description = serializers.CharField(required=False, allow_blank=True, max_length=500)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    net_weight = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True)
    gross_weight = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True)
    actual_count = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    products = serializers.ListField(child=serializers.DictField(), required=False)
    priority = serializers.ChoiceField(choices=Bundle.PRIORITY_CHOICES, required=False)


class InlineBundleSerializer(BundleContentSerializer):
    status = serializers.ChoiceField(choices=PACKING_STATUS_CHOICES, required=False)


class BundleWriteSerializer(InlineBundleSerializer):
    packing_list = serializers.IntegerField()


class ReadyToShipUpdateSerializer(BundleContentSerializer):
    ready_to_ship_status = serializers.ChoiceField(choices=Bundle.RTS_CHOICES, required=False)
    container = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class PackingListBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = PackingList
        fields = ["id", "packing_list_code", "booking_reference", "packing_status"]


class BundleSerializer(serializers.ModelSerializer):
    packing_list = PackingListBriefSerializer(read_only=True)
    container = ContainerBriefSerializer(read_only=True)

    class Meta:
        model = Bundle
        fields = [
            "id", "packing_list", "bundle_number", "description", "quantity",
            "net_weight", "gross_weight", "actual_count", "status", "products",
            "priority", "ready_to_ship_status", "container",
        ] + STAMPS


class PackingListBundleSerializer(serializers.ModelSerializer):
    """bundle rows nested under their packing list"""
    class Meta:
        model = Bundle
        fields = [
            "id", "bundle_number", "description", "quantity", "net_weight", "gross_weight",
            "actual_count", "status", "products", "priority", "ready_to_ship_status", "container",
        ] + STAMPS


# ============ Packing lists ============
class PackingListSerializer(serializers.ModelSerializer):
    booking_reference = BookingBriefSerializer(read_only=True)
    bundles = PackingListBundleSerializer(many=True, read_only=True)

    class Meta:
        model = PackingList
        fields = [
            "id", "packing_list_code", "booking_reference", "net_weight", "gross_weight",
            "packed_by", "planned_bundle_count", "actual_bundle_count", "packing_status", "bundles",
        ] + STAMPS


class PackingListWriteSerializer(serializers.Serializer):
    booking_reference = serializers.IntegerField()
    net_weight = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    gross_weight = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    packed_by = serializers.CharField(max_length=255)
    planned_bundle_count = serializers.IntegerField(min_value=0)
    actual_bundle_count = serializers.IntegerField(min_value=0, required=False)
    packing_status = serializers.ChoiceField(choices=PACKING_STATUS_CHOICES, required=False)
    bundles = InlineBundleSerializer(many=True, required=False)


# ============ Ready to ship ============
class ReadyToShipPackingListSerializer(serializers.ModelSerializer):
    booking_reference = BookingBriefSerializer(read_only=True)

    class Meta:
        model = PackingList
        fields = [
            "id", "packing_list_code", "booking_reference", "net_weight", "gross_weight",
            "packed_by", "planned_bundle_count", "actual_bundle_count", "packing_status",
        ] + STAMPS


class ReadyToShipSerializer(BundleSerializer):
    packing_list = ReadyToShipPackingListSerializer(read_only=True)


# ============ Pickup assignments ============
class LrNumberSerializer(serializers.Serializer):
    lr_number = serializers.CharField()
    status = serializers.ChoiceField(choices=PickupAssign.LR_STATUSES, required=False)


class PickupAssignSerializer(serializers.ModelSerializer):
    transport_partner = PickupPartnerBriefSerializer(read_only=True)

    class Meta:
        model = PickupAssign
        fields = ["id", "transport_partner", "lr_numbers", "assign_date", "status"] + STAMPS


class PickupAssignWriteSerializer(serializers.Serializer):
    transport_partner = serializers.IntegerField()
    lr_numbers = LrNumberSerializer(many=True)
    assign_date = serializers.DateField()
    status = serializers.ChoiceField(choices=PickupAssign.STATUS_CHOICES, required=False)


# ============ Price listings ============
class PriceListingSerializer(serializers.ModelSerializer):
    delivery_partner = DeliveryPartnerBriefSerializer(read_only=True)

    class Meta:
        model = PriceListing
        fields = [
            "id", "from_country", "to_country", "delivery_partner",
            "amount", "total_amount", "status", "is_active",
        ] + STAMPS


class PriceListingWriteSerializer(serializers.Serializer):
    from_country = serializers.CharField(max_length=100, required=False)
    to_country = serializers.CharField(max_length=100)
    delivery_partner = serializers.IntegerField(required=False, allow_null=True)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    status = serializers.ChoiceField(choices=ACTIVE_STATUS_CHOICES, required=False)
    is_active = serializers.BooleanField(required=False)


# ============ Reminders ============
class ReminderSerializer(serializers.ModelSerializer):
    customer = CustomerBriefSerializer(read_only=True)

    class Meta:
        model = Reminder
        fields = [
            "id", "date", "description", "purpose", "whatsapp", "customer", "whatsapp_number",
            "whatsapp_sent", "whatsapp_sent_at", "whatsapp_error", "whatsapp_message_sid",
        ] + STAMPS


class ReminderWriteSerializer(serializers.Serializer):
    date = serializers.DateField()
    description = serializers.CharField(max_length=500)
    purpose = serializers.CharField(max_length=200)
    whatsapp = serializers.BooleanField(required=False)
    customer = serializers.IntegerField(required=False, allow_null=True)
    whatsapp_number = serializers.CharField(max_length=50, required=False, allow_blank=True)
