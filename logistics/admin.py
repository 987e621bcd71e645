from django.contrib import admin
from .models import (
    Booking, Bundle, Container, Customer, DeliveryPartner, PackingList,
    PickupAssign, PickupPartner, PriceListing, Reminder, Store,
)


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "customer_type", "phone", "country", "status")
    list_filter = ("customer_type", "status")
    search_fields = ("name", "shop_name", "phone")


@admin.register(PickupPartner, DeliveryPartner)
class PartnerAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "phone_number", "price", "status")
    search_fields = ("name", "phone_number")


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "code", "city", "country", "is_active")
    search_fields = ("name", "code")


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "booking_code", "sender", "receiver", "date", "bundle_count", "status")
    list_filter = ("status", "repacking")
    search_fields = ("booking_code", "sender__name", "receiver__name")
    readonly_fields = ("booking_code",)


@admin.register(Container)
class ContainerAdmin(admin.ModelAdmin):
    list_display = ("id", "container_code", "company_name", "booking_charge", "advance_payment", "balance_amount", "status")
    list_filter = ("status",)
    readonly_fields = ("container_code", "balance_amount")


class BundleInline(admin.TabularInline):
    model = Bundle
    extra = 0
    fields = ("bundle_number", "quantity", "status", "priority", "ready_to_ship_status", "container")


@admin.register(PackingList)
class PackingListAdmin(admin.ModelAdmin):
    list_display = ("id", "packing_list_code", "booking_reference", "packed_by", "packing_status")
    list_filter = ("packing_status",)
    readonly_fields = ("packing_list_code",)
    inlines = [BundleInline]


@admin.register(Bundle)
class BundleAdmin(admin.ModelAdmin):
    list_display = ("id", "bundle_number", "packing_list", "quantity", "status", "ready_to_ship_status", "container")
    list_filter = ("status", "priority", "ready_to_ship_status")


@admin.register(PickupAssign)
class PickupAssignAdmin(admin.ModelAdmin):
    list_display = ("id", "transport_partner", "assign_date", "status")


@admin.register(PriceListing)
class PriceListingAdmin(admin.ModelAdmin):
    list_display = ("id", "from_country", "to_country", "delivery_partner", "amount", "total_amount", "status")


@admin.register(Reminder)
class ReminderAdmin(admin.ModelAdmin):
    list_display = ("id", "date", "purpose", "whatsapp", "whatsapp_sent")
    list_filter = ("whatsapp", "whatsapp_sent")
