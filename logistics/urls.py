# logistics/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    BookingViewSet, BundleViewSet, ContainerViewSet, CustomerViewSet,
    DeliveryPartnerViewSet, PackingListViewSet, PickupAssignViewSet,
    PickupPartnerViewSet, PriceListingViewSet, ReadyToShipViewSet,
    ReminderViewSet, StoreViewSet,
    booking_report, container_report, customer_report,
    delivery_partner_report, packing_list_report, pickup_partner_report,
)

router = DefaultRouter()
router.register(r"customers", CustomerViewSet, basename="customer")                 # /api/customers/
router.register(r"pickup-partners", PickupPartnerViewSet, basename="pickup-partner")
router.register(r"delivery-partners", DeliveryPartnerViewSet, basename="delivery-partner")
router.register(r"stores", StoreViewSet, basename="store")
router.register(r"bookings", BookingViewSet, basename="booking")
router.register(r"containers", ContainerViewSet, basename="container")
router.register(r"packing-lists", PackingListViewSet, basename="packing-list")
router.register(r"bundles", BundleViewSet, basename="bundle")
router.register(r"ready-to-ship", ReadyToShipViewSet, basename="ready-to-ship")
router.register(r"pickup-assign", PickupAssignViewSet, basename="pickup-assign")
router.register(r"price-listings", PriceListingViewSet, basename="price-listing")
router.register(r"reminders", ReminderViewSet, basename="reminder")

urlpatterns = [
    path("", include(router.urls)),

    path("reports/customers/", customer_report, name="report-customers"),
    path("reports/containers/", container_report, name="report-containers"),
    path("reports/delivery-partners/", delivery_partner_report, name="report-delivery-partners"),
    path("reports/pickup-partners/", pickup_partner_report, name="report-pickup-partners"),
    path("reports/bookings/", booking_report, name="report-bookings"),
    path("reports/packing-lists/", packing_list_report, name="report-packing-lists"),
]
