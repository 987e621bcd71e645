# logistics/views.py
# ============================================================
# Imports
# ============================================================
import logging
import re
from datetime import datetime, time, timezone as dt_timezone
from decimal import Decimal

from django.db.models import Avg, Count, Q, Sum
from django.http import Http404
from django.utils.dateparse import parse_date

from rest_framework import permissions, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.response import Response

from . import services
from .models import (
    Booking, Bundle, Container, Customer, DeliveryPartner, PackingList,
    PickupAssign, PickupPartner, PriceListing, Reminder, Store,
    ACTIVE, PACKING_COMPLETED,
)
from .serializers import (
    BookingSerializer, BookingWriteSerializer,
    BundleSerializer, BundleWriteSerializer,
    ContainerSerializer,
    CustomerSerializer,
    DeliveryPartnerSerializer,
    PackingListSerializer, PackingListWriteSerializer,
    PickupAssignSerializer, PickupAssignWriteSerializer,
    PickupPartnerSerializer,
    PriceListingSerializer, PriceListingWriteSerializer,
    ReadyToShipSerializer, ReadyToShipUpdateSerializer,
    ReminderSerializer, ReminderWriteSerializer,
    StoreSerializer,
)
from .services import BadRequest, NotFound

logger = logging.getLogger(__name__)

SORT_ALIASES = {
    "createdAt": "date_created",
    "created_at": "date_created",
    "updatedAt": "last_modified",
    "updated_at": "last_modified",
}


# -------- query param helpers --------
def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _param(params, name):
    """empty and "all" mean no filter"""
    value = (params.get(name) or "").strip()
    if not value or value == "all":
        return None
    return value


def _id_param(params, name):
    value = _param(params, name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise BadRequest(f"Invalid {name}")


def _bool_param(params, name):
    value = _param(params, name)
    if value is None:
        return None
    return value.lower() in ("true", "1", "yes")


# ============================================================
# Base viewset
# ============================================================
class LogisticsViewSet(viewsets.ModelViewSet):
    """
    Shared list/detail plumbing for every resource:
      - page=1&limit=10
      - sortBy=<field> (alias sortField) & sortOrder=asc|desc
      - mutations answer {"data": <row>, "message": "..."}
    PUT and PATCH both apply partial updates.
    """
    permission_classes = [permissions.AllowAny]  # later: IsAuthenticated
    write_serializer_class = None
    label = "Record"
    sort_fields = ("date_created", "last_modified")
    default_ordering = ("-date_created", "-id")

    # -------- helpers --------
    def get_serializer_class(self):
        if self.action in ("create", "update", "partial_update") and self.write_serializer_class:
            return self.write_serializer_class
        return self.serializer_class

    def read(self, instance):
        return self.serializer_class(instance, context=self.get_serializer_context()).data

    def refetch(self, instance):
        # reload with the viewset's select_related / prefetch_related
        return self.queryset.all().filter(pk=instance.pk).first() or instance

    def get_object(self):
        try:
            return super().get_object()
        except Http404:
            raise NotFound(f"{self.label} not found")

    def ordering(self):
        params = self.request.query_params
        requested = params.get("sortBy") or params.get("sortField")
        if requested:
            field = SORT_ALIASES.get(requested, _snake(requested))
            if field in self.sort_fields:
                prefix = "" if (params.get("sortOrder") or "").lower() == "asc" else "-"
                return [f"{prefix}{field}", f"{prefix}id"]
        return list(self.default_ordering)

    def filter_queryset(self, queryset):
        return queryset.order_by(*self.ordering())

    def write_message(self, instance, created: bool) -> str:
        return f"{self.label} {'created' if created else 'updated'} successfully"

    # -------- create/update --------
    def perform_write(self, serializer, instance=None):
        return serializer.save()

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        instance = self.perform_write(serializer)
        return Response(
            {"data": self.read(self.refetch(instance)), "message": self.write_message(instance, True)},
            status=201,
        )

    def update(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        instance = self.perform_write(serializer, instance)
        return Response({"data": self.read(self.refetch(instance)), "message": self.write_message(instance, False)})

    def retrieve(self, request, *args, **kwargs):
        return Response({"data": self.read(self.get_object())})

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        pk = instance.pk
        self.perform_destroy(instance)
        logger.info(f"[{self.label}] deleted #{pk}")
        return Response({"data": {"success": True}, "message": f"{self.label} deleted successfully"})


# ============================================================
# Customers, partners, stores
# ============================================================
class CustomerViewSet(LogisticsViewSet):
    """
    /api/customers/
      - customerType=Sender|Receiver|all
      - status=Active|Inactive|all
      - search=<name, shop, phone, location, country>
    """
    queryset = Customer.objects.all()
    serializer_class = CustomerSerializer
    label = "Customer"
    sort_fields = ("name", "customer_type", "status", "country", "date_created", "last_modified")

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params

        customer_type = _param(params, "customerType")
        if customer_type:
            qs = qs.filter(customer_type=customer_type)
        status_ = _param(params, "status")
        if status_:
            qs = qs.filter(status=status_)

        q = _param(params, "search")
        if q:
            qs = qs.filter(
                Q(name__icontains=q) |
                Q(shop_name__icontains=q) |
                Q(phone__icontains=q) |
                Q(location__icontains=q) |
                Q(country__icontains=q)
            )
        return qs

    def perform_write(self, serializer, instance=None):
        return services.save_customer(serializer.validated_data, instance)


class PartnerFilterMixin:
    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params
        status_ = _param(params, "status")
        if status_:
            qs = qs.filter(status=status_)
        q = _param(params, "search")
        if q:
            qs = qs.filter(Q(name__icontains=q) | Q(phone_number__icontains=q))
        return qs


class PickupPartnerViewSet(PartnerFilterMixin, LogisticsViewSet):
    """
    /api/pickup-partners/
      - status=Active|Inactive|all
      - search=<name or phone>
    """
    queryset = PickupPartner.objects.all()
    serializer_class = PickupPartnerSerializer
    label = "Pickup partner"
    sort_fields = ("name", "price", "status", "date_created", "last_modified")


class DeliveryPartnerViewSet(PartnerFilterMixin, LogisticsViewSet):
    """
    /api/delivery-partners/
      - status=Active|Inactive|all
      - fromCountry=..., toCountry=...
      - search=<name or phone>
    """
    queryset = DeliveryPartner.objects.all()
    serializer_class = DeliveryPartnerSerializer
    label = "Delivery partner"
    sort_fields = ("name", "price", "from_country", "to_country", "status", "date_created", "last_modified")

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params
        from_country = _param(params, "fromCountry")
        if from_country:
            qs = qs.filter(from_country__iexact=from_country)
        to_country = _param(params, "toCountry")
        if to_country:
            qs = qs.filter(to_country__iexact=to_country)
        return qs


class StoreViewSet(LogisticsViewSet):
    """
    /api/stores/
      - lists active stores only
      - search=<name, code, city, country>
    """
    queryset = Store.objects.all()
    serializer_class = StoreSerializer
    label = "Store"
    sort_fields = ("name", "code", "city", "country", "date_created", "last_modified")

    def get_queryset(self):
        qs = super().get_queryset()
        if self.action != "list":
            return qs
        qs = qs.filter(is_active=True)
        q = _param(self.request.query_params, "search")
        if q:
            qs = qs.filter(
                Q(name__icontains=q) |
                Q(code__icontains=q) |
                Q(city__icontains=q) |
                Q(country__icontains=q)
            )
        return qs

    def perform_write(self, serializer, instance=None):
        return services.save_store(serializer, instance)


# ============================================================
# Bookings & containers
# ============================================================
class BookingViewSet(LogisticsViewSet):
    """
    /api/bookings/
      - status=pending|success|all
      - sender=<id>, receiver=<id>
      - receiverCountry=<text>
      - search=<booking code, sender/receiver name, receiver country, pickup partner name>
    """
    queryset = Booking.objects.select_related("sender", "receiver", "pickup_partner", "store")
    serializer_class = BookingSerializer
    write_serializer_class = BookingWriteSerializer
    label = "Booking"
    sort_fields = (
        "booking_code", "date", "expected_receiving_date", "bundle_count", "status",
        "date_created", "last_modified",
    )

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params

        status_ = _param(params, "status")
        if status_:
            qs = qs.filter(status=status_)
        sender = _id_param(params, "sender")
        if sender:
            qs = qs.filter(sender_id=sender)
        receiver = _id_param(params, "receiver")
        if receiver:
            qs = qs.filter(receiver_id=receiver)
        country = _param(params, "receiverCountry")
        if country:
            qs = qs.filter(receiver__country__icontains=country)

        q = _param(params, "search")
        if q:
            qs = qs.filter(
                Q(booking_code__icontains=q) |
                Q(sender__name__icontains=q) |
                Q(receiver__name__icontains=q) |
                Q(receiver__country__icontains=q) |
                Q(pickup_partner__name__icontains=q)
            )
        return qs

    def perform_write(self, serializer, instance=None):
        if instance is None:
            return services.create_booking(serializer.validated_data)
        return services.update_booking(instance, serializer.validated_data)


class ContainerViewSet(LogisticsViewSet):
    """
    /api/containers/
      - status=pending|confirmed|completed|cancelled|all
      - search=<container code or company>
    """
    queryset = Container.objects.all()
    serializer_class = ContainerSerializer
    label = "Container"
    sort_fields = (
        "container_code", "company_name", "booking_date", "booking_charge",
        "balance_amount", "status", "date_created", "last_modified",
    )

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params
        status_ = _param(params, "status")
        if status_:
            qs = qs.filter(status=status_)
        q = _param(params, "search")
        if q:
            qs = qs.filter(Q(container_code__icontains=q) | Q(company_name__icontains=q))
        return qs

    def perform_write(self, serializer, instance=None):
        if instance is None:
            return services.create_container(serializer.validated_data)
        return services.update_container(instance, serializer.validated_data)


# ============================================================
# Packing lists & bundles
# ============================================================
def _bundle_totals(queryset) -> dict:
    totals = queryset.aggregate(
        total_bundles=Count("id"),
        total_quantity=Sum("quantity"),
        total_net_weight=Sum("net_weight"),
        total_gross_weight=Sum("gross_weight"),
    )
    return {
        "total_bundles": totals["total_bundles"] or 0,
        "total_quantity": totals["total_quantity"] or Decimal("0"),
        "total_net_weight": totals["total_net_weight"] or Decimal("0"),
        "total_gross_weight": totals["total_gross_weight"] or Decimal("0"),
        "total_products": sum(len(p or []) for p in queryset.values_list("products", flat=True)),
    }


class PackingListViewSet(LogisticsViewSet):
    """
    /api/packing-lists/
      - packingStatus=pending|in_progress|completed|all
      - search=<packing list code or packed by>
    POST/PUT accept an inline "bundles" array; on update it replaces the list's bundles.
    """
    queryset = (
        PackingList.objects
        .select_related("booking_reference__sender", "booking_reference__receiver",
                        "booking_reference__pickup_partner")
        .prefetch_related("bundles")
    )
    serializer_class = PackingListSerializer
    write_serializer_class = PackingListWriteSerializer
    label = "Packing list"
    sort_fields = (
        "packing_list_code", "packed_by", "net_weight", "gross_weight",
        "packing_status", "date_created", "last_modified",
    )

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params
        packing_status = _param(params, "packingStatus")
        if packing_status:
            qs = qs.filter(packing_status=packing_status)
        q = _param(params, "search")
        if q:
            qs = qs.filter(Q(packing_list_code__icontains=q) | Q(packed_by__icontains=q))
        return qs

    def perform_write(self, serializer, instance=None):
        if instance is None:
            return services.create_packing_list(serializer.validated_data)
        return services.update_packing_list(instance, serializer.validated_data)

    def perform_destroy(self, instance):
        services.delete_packing_list(instance)


class BundleViewSet(LogisticsViewSet):
    """
    /api/bundles/
      - packingListId=<id>
      - status=pending|in_progress|completed|all
      - search=<bundle number or description>
    /api/bundles/packing-list/<id>/        bundles of one packing list by bundle number
    /api/bundles/packing-list/<id>/stats/  totals and status counts
    """
    queryset = Bundle.objects.select_related("packing_list", "container")
    serializer_class = BundleSerializer
    write_serializer_class = BundleWriteSerializer
    label = "Bundle"
    sort_fields = (
        "bundle_number", "quantity", "status", "priority", "ready_to_ship_status",
        "date_created", "last_modified",
    )

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params
        packing_list = _id_param(params, "packingListId")
        if packing_list:
            qs = qs.filter(packing_list_id=packing_list)
        status_ = _param(params, "status")
        if status_:
            qs = qs.filter(status=status_)
        q = _param(params, "search")
        if q:
            qs = qs.filter(Q(bundle_number__icontains=q) | Q(description__icontains=q))
        return qs

    def perform_write(self, serializer, instance=None):
        if instance is None:
            return services.create_bundle(serializer.validated_data)
        return services.update_bundle(instance, serializer.validated_data)

    # -------- extra endpoints --------
    def _packing_list_bundles(self, packing_list_id):
        try:
            pk = int(packing_list_id)
        except (TypeError, ValueError):
            raise BadRequest("Invalid packing list ID")
        return Bundle.objects.select_related("packing_list", "container").filter(packing_list_id=pk)

    @action(detail=False, methods=["GET"], url_path=r"packing-list/(?P<packing_list_id>[^/.]+)")
    def by_packing_list(self, request, packing_list_id=None):
        bundles = self._packing_list_bundles(packing_list_id).order_by("bundle_number")
        return Response({"data": BundleSerializer(bundles, many=True).data})

    @action(detail=False, methods=["GET"], url_path=r"packing-list/(?P<packing_list_id>[^/.]+)/stats")
    def packing_list_stats(self, request, packing_list_id=None):
        bundles = self._packing_list_bundles(packing_list_id)
        stats = _bundle_totals(bundles)
        stats["status_counts"] = {
            row["status"]: row["n"]
            for row in bundles.order_by().values("status").annotate(n=Count("id"))
        }
        return Response({"data": stats})


class ReadyToShipViewSet(LogisticsViewSet):
    """
    /api/ready-to-ship/   completed bundles only
      - priority=high|medium|low|all
      - readyToShipStatus=pending|stuffed|dispatched|all
      - search=<bundle number or description>
      - sortField=bundleNumber|quantity|createdAt|updatedAt
    /api/ready-to-ship/stats/
    """
    queryset = Bundle.objects.select_related(
        "packing_list__booking_reference__sender",
        "packing_list__booking_reference__receiver",
        "packing_list__booking_reference__pickup_partner",
        "container",
    )
    serializer_class = ReadyToShipSerializer
    write_serializer_class = ReadyToShipUpdateSerializer
    label = "Bundle"
    http_method_names = ["get", "put", "patch", "head", "options"]
    sort_fields = ("bundle_number", "quantity", "priority", "ready_to_ship_status", "date_created", "last_modified")

    def get_queryset(self):
        qs = super().get_queryset()
        if self.action != "list":
            return qs
        params = self.request.query_params
        qs = qs.filter(status=PACKING_COMPLETED)
        priority = _param(params, "priority")
        if priority:
            qs = qs.filter(priority=priority)
        rts_status = _param(params, "readyToShipStatus")
        if rts_status:
            qs = qs.filter(ready_to_ship_status=rts_status)
        q = _param(params, "search")
        if q:
            qs = qs.filter(Q(bundle_number__icontains=q) | Q(description__icontains=q))
        return qs

    def retrieve(self, request, *args, **kwargs):
        bundle = self.get_object()
        services.ensure_ready_to_ship(bundle)
        return Response({"data": self.read(bundle)})

    def perform_write(self, serializer, instance=None):
        return services.update_ready_to_ship(instance, serializer.validated_data)

    @action(detail=False, methods=["GET"], url_path="stats")
    def stats(self, request):
        return Response({"data": _bundle_totals(Bundle.objects.filter(status=PACKING_COMPLETED))})


# ============================================================
# Pickup assignments, price listings, reminders
# ============================================================
class PickupAssignViewSet(LogisticsViewSet):
    """
    /api/pickup-assign/
      - status=Pending|Completed|all
      - transportPartnerId=<id>
      - search=<partner name/phone or LR number>
    PATCH /api/pickup-assign/<id>/lr-status/  {"lr_number": "...", "status": "Collected"}
    """
    queryset = PickupAssign.objects.select_related("transport_partner")
    serializer_class = PickupAssignSerializer
    write_serializer_class = PickupAssignWriteSerializer
    label = "Pickup assignment"
    sort_fields = ("assign_date", "status", "date_created", "last_modified")

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params
        status_ = _param(params, "status")
        if status_:
            qs = qs.filter(status=status_)
        partner = _id_param(params, "transportPartnerId")
        if partner:
            qs = qs.filter(transport_partner_id=partner)
        q = _param(params, "search")
        if q:
            qs = qs.filter(
                Q(transport_partner__name__icontains=q) |
                Q(transport_partner__phone_number__icontains=q) |
                Q(lr_numbers__icontains=q)
            )
        return qs

    def perform_write(self, serializer, instance=None):
        return services.save_pickup_assign(serializer.validated_data, instance)

    @action(detail=True, methods=["PATCH"], url_path="lr-status")
    def lr_status(self, request, pk=None):
        assignment = services.update_lr_status(
            self.get_object(), request.data.get("lr_number"), request.data.get("status")
        )
        return Response({
            "data": self.read(self.refetch(assignment)),
            "message": "LR number status updated successfully",
        })


class PriceListingViewSet(LogisticsViewSet):
    """
    /api/price-listings/
      - status=Active|Inactive|all
      - fromCountry=..., toCountry=...
      - search=<country or delivery partner name>
    total_amount = amount + delivery partner price
    """
    queryset = PriceListing.objects.select_related("delivery_partner")
    serializer_class = PriceListingSerializer
    write_serializer_class = PriceListingWriteSerializer
    label = "Price listing"
    sort_fields = ("from_country", "to_country", "amount", "total_amount", "status", "date_created", "last_modified")

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params
        status_ = _param(params, "status")
        if status_:
            qs = qs.filter(status=status_)
        from_country = _param(params, "fromCountry")
        if from_country:
            qs = qs.filter(from_country__iexact=from_country)
        to_country = _param(params, "toCountry")
        if to_country:
            qs = qs.filter(to_country__iexact=to_country)
        q = _param(params, "search")
        if q:
            qs = qs.filter(
                Q(from_country__icontains=q) |
                Q(to_country__icontains=q) |
                Q(delivery_partner__name__icontains=q)
            )
        return qs

    def perform_write(self, serializer, instance=None):
        return services.save_price_listing(serializer.validated_data, instance)


class ReminderViewSet(LogisticsViewSet):
    """
    /api/reminders/
      - whatsapp=true|false|all
      - search=<description or purpose>
    POST /api/reminders/<id>/send-whatsapp/  resend the WhatsApp notification
    """
    queryset = Reminder.objects.select_related("customer")
    serializer_class = ReminderSerializer
    write_serializer_class = ReminderWriteSerializer
    label = "Reminder"
    sort_fields = ("date", "purpose", "whatsapp", "date_created", "last_modified")

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params
        whatsapp = _bool_param(params, "whatsapp")
        if whatsapp is not None:
            qs = qs.filter(whatsapp=whatsapp)
        q = _param(params, "search")
        if q:
            qs = qs.filter(Q(description__icontains=q) | Q(purpose__icontains=q))
        return qs

    def perform_write(self, serializer, instance=None):
        reminder, self.send_result = services.save_reminder(serializer.validated_data, instance)
        return reminder

    def write_message(self, instance, created):
        message = super().write_message(instance, created)
        result = getattr(self, "send_result", None)
        if result is None:
            return message
        if result.success:
            return f"{message} (WhatsApp notification sent)"
        return f"{message} (WhatsApp notification failed: {result.error})"

    @action(detail=True, methods=["POST"], url_path="send-whatsapp")
    def send_whatsapp(self, request, pk=None):
        reminder = self.get_object()
        result = services.dispatch_reminder_whatsapp(reminder)
        message = "WhatsApp notification sent" if result.success \
            else f"WhatsApp notification failed: {result.error}"
        return Response({"data": self.read(reminder), "message": message})


# ============================================================
# Reports
#   ?from=YYYY-MM-DD&to=YYYY-MM-DD (both inclusive) + entity filters
#   -> {"data": [...], "summary": {...}}
# ============================================================
def _report_dates(request):
    dates = []
    for name in ("from", "to"):
        raw = _param(request.query_params, name)
        if raw is None:
            dates.append(None)
            continue
        try:
            value = parse_date(raw[:10])
        except ValueError:
            value = None
        if value is None:
            raise BadRequest("Invalid date format")
        dates.append(value)
    return dates


def _filter_dates(qs, request, field="date"):
    """for DateField columns"""
    start, end = _report_dates(request)
    if start:
        qs = qs.filter(**{f"{field}__gte": start})
    if end:
        qs = qs.filter(**{f"{field}__lte": end})
    return qs


def _filter_created(qs, request):
    """for the unix date_created stamp; the end day is included up to 23:59:59"""
    start, end = _report_dates(request)
    if start:
        qs = qs.filter(date_created__gte=int(datetime.combine(start, time.min, tzinfo=dt_timezone.utc).timestamp()))
    if end:
        qs = qs.filter(date_created__lte=int(datetime.combine(end, time.max, tzinfo=dt_timezone.utc).timestamp()))
    return qs


def _partner_summary(qs) -> dict:
    agg = qs.aggregate(total=Count("id"), total_price=Sum("price"), average_price=Avg("price"))
    return {
        "total_partners": agg["total"] or 0,
        "active_partners": qs.filter(status=ACTIVE).count(),
        "total_price": agg["total_price"] or Decimal("0"),
        "average_price": round(agg["average_price"] or Decimal("0"), 2),
    }


@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def customer_report(request):
    qs = _filter_created(Customer.objects.all(), request)
    customer_type = _param(request.query_params, "customerType")
    if customer_type:
        qs = qs.filter(customer_type=customer_type)
    qs = qs.order_by("-date_created", "-id")

    rows = []
    total_paid = total_credit = Decimal("0")
    for customer in qs:
        paid = credit = Decimal("0")
        if customer.customer_type == Customer.RECEIVER:
            credit = customer.credit or Decimal("0")
            paid = sum(
                (Decimal(str(p.get("amount") or 0)) for p in customer.payment_history or [] if isinstance(p, dict)),
                Decimal("0"),
            )
        row = CustomerSerializer(customer).data
        row.update(total_amount=paid, total_credit=credit, balance_amount=credit - paid)
        rows.append(row)
        total_paid += paid
        total_credit += credit

    return Response({
        "data": rows,
        "summary": {
            "total_customers": len(rows),
            "total_amount": total_paid,
            "total_credit": total_credit,
            "balance_amount": total_credit - total_paid,
        },
    })


@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def container_report(request):
    qs = _filter_dates(Container.objects.all(), request, "booking_date")
    status_ = _param(request.query_params, "status")
    if status_:
        qs = qs.filter(status=status_)
    qs = qs.order_by("-booking_date", "-id")

    agg = qs.aggregate(
        total=Count("id"),
        charge=Sum("booking_charge"),
        advance=Sum("advance_payment"),
        balance=Sum("balance_amount"),
    )
    return Response({
        "data": ContainerSerializer(qs, many=True).data,
        "summary": {
            "total_containers": agg["total"] or 0,
            "total_booking_charge": agg["charge"] or Decimal("0"),
            "total_advance_payment": agg["advance"] or Decimal("0"),
            "total_balance_amount": agg["balance"] or Decimal("0"),
        },
    })


@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def delivery_partner_report(request):
    qs = _filter_created(DeliveryPartner.objects.all(), request)
    status_ = _param(request.query_params, "status")
    if status_:
        qs = qs.filter(status=status_)
    qs = qs.order_by("-date_created", "-id")
    return Response({
        "data": DeliveryPartnerSerializer(qs, many=True).data,
        "summary": _partner_summary(qs),
    })


@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def pickup_partner_report(request):
    qs = _filter_created(PickupPartner.objects.all(), request)
    status_ = _param(request.query_params, "status")
    if status_:
        qs = qs.filter(status=status_)
    qs = qs.order_by("-date_created", "-id")
    return Response({
        "data": PickupPartnerSerializer(qs, many=True).data,
        "summary": _partner_summary(qs),
    })


@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def booking_report(request):
    params = request.query_params
    qs = _filter_dates(
        Booking.objects.select_related("sender", "receiver", "pickup_partner", "store"), request, "date"
    )
    status_ = _param(params, "status")
    if status_:
        qs = qs.filter(status=status_)
    sender = _id_param(params, "sender")
    if sender:
        qs = qs.filter(sender_id=sender)
    receiver = _id_param(params, "receiver")
    if receiver:
        qs = qs.filter(receiver_id=receiver)
    qs = qs.order_by("-date", "-id")

    agg = qs.aggregate(
        total=Count("id"),
        bundles=Sum("bundle_count"),
        pending=Count("id", filter=Q(status=Booking.PENDING)),
        success=Count("id", filter=Q(status=Booking.SUCCESS)),
        pickup=Sum("pickup_partner__price"),
    )
    return Response({
        "data": BookingSerializer(qs, many=True).data,
        "summary": {
            "total_bookings": agg["total"] or 0,
            "total_bundles": agg["bundles"] or 0,
            "pending_bookings": agg["pending"] or 0,
            "success_bookings": agg["success"] or 0,
            "total_pickup_charges": agg["pickup"] or Decimal("0"),
        },
    })


@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def packing_list_report(request):
    qs = _filter_created(
        PackingList.objects
        .select_related("booking_reference__sender", "booking_reference__receiver",
                        "booking_reference__pickup_partner")
        .prefetch_related("bundles"),
        request,
    )
    packing_status = _param(request.query_params, "packingStatus")
    if packing_status:
        qs = qs.filter(packing_status=packing_status)
    qs = qs.order_by("-date_created", "-id")

    agg = qs.aggregate(
        total=Count("id"),
        net=Sum("net_weight"),
        gross=Sum("gross_weight"),
    )
    return Response({
        "data": PackingListSerializer(qs, many=True).data,
        "summary": {
            "total_packing_lists": agg["total"] or 0,
            "total_net_weight": agg["net"] or Decimal("0"),
            "total_gross_weight": agg["gross"] or Decimal("0"),
            "total_bundles": Bundle.objects.filter(packing_list__in=qs).count(),
        },
    })
