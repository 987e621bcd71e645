# logistics/services.py

from __future__ import annotations

import logging
import math
import re
import time
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from . import whatsapp
from .models import (
    Booking, Bundle, Container, Customer, DeliveryPartner, PackingList,
    PickupAssign, PickupPartner, PriceListing, Reminder, Store,
    PACKING_COMPLETED,
)

logger = logging.getLogger(__name__)

BOOKING_SEQUENCE_LIMIT = 999
CODE_INSERT_ATTEMPTS = 3


# ============ Errors ============
class LogisticsError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class BadRequest(LogisticsError):
    status_code = 400


class NotFound(LogisticsError):
    status_code = 404


class Conflict(LogisticsError):
    status_code = 409


# -------- lookups --------
def _to_pk(value, message: str) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise BadRequest(message)


def _fetch(model, value, message: str, error=BadRequest):
    obj = model.objects.filter(pk=_to_pk(value, message)).first()
    if obj is None:
        raise error(message)
    return obj


# ================== Code generation ==================

def _name_segment(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9]", "", name or "")[:3].upper()


def booking_code_prefix(sender_name: str, receiver_name: str, booking_date: date) -> str:
    return f"{_name_segment(sender_name)}_{_name_segment(receiver_name)}_{booking_date:%Y%m%d}"


def generate_booking_code(sender_name: str, receiver_name: str, booking_date: date) -> str:
    """
    ACM_GLO_20240110_001 .. _999, first free slot wins.
    When every slot is used the suffix becomes the last 6 digits of the
    current millisecond clock; that value is not probed again, the unique
    constraint on booking_code catches the rare clash.
    """
    prefix = booking_code_prefix(sender_name, receiver_name, booking_date)
    taken = set(
        Booking.objects
        .filter(booking_code__startswith=f"{prefix}_")
        .values_list("booking_code", flat=True)
    )
    for seq in range(1, BOOKING_SEQUENCE_LIMIT + 1):
        candidate = f"{prefix}_{seq:03d}"
        if candidate not in taken:
            return candidate

    fallback = f"{prefix}_{str(int(time.time() * 1000))[-6:]}"
    logger.warning(f"[Codes] all {BOOKING_SEQUENCE_LIMIT} booking sequences used for {prefix}, using {fallback}")
    return fallback


def generate_container_code(today: Optional[date] = None) -> str:
    today = today or timezone.localdate()
    prefix = f"CNT{today:%y%m}"
    # compare suffixes as numbers, CNT240110000 sorts below CNT24019999 as text
    highest = 0
    for code in Container.objects.filter(container_code__startswith=prefix).values_list(
        "container_code", flat=True
    ):
        suffix = code[len(prefix):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return f"{prefix}{highest + 1:04d}"


def generate_packing_list_code(year: Optional[int] = None) -> str:
    year = year or timezone.localdate().year
    prefix = f"PL-{year}-"
    highest = 0
    for code in PackingList.objects.filter(packing_list_code__startswith=prefix).values_list(
        "packing_list_code", flat=True
    ):
        suffix = code[len(prefix):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return f"{prefix}{highest + 1:03d}"


def _insert_with_code(obj, field: str, generate: Callable[[], str], attempts: int,
                      delay: float = 0.0, exhausted: str = "Unable to generate unique code"):
    """
    Generate a code and insert inside a savepoint. A unique violation on the
    code field means another request won the candidate, so try again.
    """
    model = type(obj)
    for attempt in range(1, attempts + 1):
        code = generate()
        setattr(obj, field, code)
        try:
            with transaction.atomic():
                obj.save()
            return obj
        except IntegrityError:
            if not model.objects.filter(**{field: code}).exists():
                raise
            logger.warning(f"[Codes] {model.__name__}.{field}={code} already taken (attempt {attempt}/{attempts})")
            if delay and attempt < attempts:
                time.sleep(delay)
    logger.error(f"[Codes] giving up on {model.__name__}.{field} after {attempts} attempts")
    raise Conflict(exhausted)


# ================== Balances ==================

def container_balance(booking_charge, advance_payment) -> Decimal:
    balance = Container.balance_for(booking_charge, advance_payment)
    if balance < 0:
        raise BadRequest("Advance payment cannot exceed booking charge")
    return balance


def price_listing_total(amount, delivery_partner: Optional[DeliveryPartner]) -> Decimal:
    total = Decimal(str(amount or 0))
    if delivery_partner is not None:
        # read the partner price at recompute time, never a cached copy
        price = DeliveryPartner.objects.filter(pk=delivery_partner.pk).values_list("price", flat=True).first()
        total += price or Decimal("0")
    return total


# ================== Customers ==================

def save_customer(data: dict, instance: Optional[Customer] = None) -> Customer:
    customer = instance or Customer()
    customer_type = data.get("customer_type") or customer.customer_type
    if customer_type not in (Customer.SENDER, Customer.RECEIVER):
        raise BadRequest("Customer type must be either Sender or Receiver")

    # fields of the other type are ignored, existing values stay as they are
    ignored = Customer.RECEIVER_FIELDS if customer_type == Customer.SENDER else Customer.SENDER_FIELDS
    for field, value in data.items():
        if field in ignored:
            continue
        setattr(customer, field, value)

    customer.full_clean()
    customer.save()
    return customer


# ================== Bookings ==================

def parse_pickup(value) -> tuple[str, Optional[PickupPartner]]:
    """"Self" / "Central" or the id of an existing pickup partner."""
    if isinstance(value, str) and value in Booking.PICKUP_SENTINELS:
        return Booking.PICKUP_SENTINELS[value], None
    partner = _fetch(PickupPartner, value, "Pickup partner not found")
    return Booking.PICKUP_PARTNER, partner


def _sender(value) -> Customer:
    customer = _fetch(Customer, value, "Sender customer not found")
    if customer.customer_type != Customer.SENDER:
        raise BadRequest('Selected sender must be of type "Sender"')
    return customer


def _receiver(value) -> Customer:
    customer = _fetch(Customer, value, "Receiver customer not found")
    if customer.customer_type != Customer.RECEIVER:
        raise BadRequest('Selected receiver must be of type "Receiver"')
    return customer


def _check_branch(receiver: Customer, branch: str):
    names = receiver.branch_names()
    if branch and names and branch not in names:
        raise BadRequest("Selected branch does not exist for this receiver")


def _store_or_none(value) -> Optional[Store]:
    if value in (None, ""):
        return None
    return _fetch(Store, value, "Store not found")


def _check_booking_rules(booking: Booking):
    if booking.expected_receiving_date <= booking.date:
        raise BadRequest("Expected receiving date must be after booking date")
    if booking.bundle_count is None or booking.bundle_count < 1:
        raise BadRequest("Bundle count must be at least 1")


def create_booking(data: dict) -> Booking:
    sender = _sender(data["sender"])
    receiver = _receiver(data["receiver"])
    branch = data.get("receiver_branch") or ""
    _check_branch(receiver, branch)
    pickup_kind, pickup_partner = parse_pickup(data["pickup_partner"])

    booking = Booking(
        sender=sender,
        receiver=receiver,
        receiver_branch=branch,
        pickup_kind=pickup_kind,
        pickup_partner=pickup_partner,
        store=_store_or_none(data.get("store")),
        date=data["date"],
        expected_receiving_date=data["expected_receiving_date"],
        bundle_count=data["bundle_count"],
        status=data.get("status") or Booking.PENDING,
        repacking=data.get("repacking") or Booking.READY_TO_SHIP,
    )
    _check_booking_rules(booking)

    booking = _insert_with_code(
        booking, "booking_code",
        lambda: generate_booking_code(sender.name, receiver.name, booking.date),
        CODE_INSERT_ATTEMPTS,
        exhausted="Unable to generate unique booking code",
    )
    logger.info(f"[Booking] created {booking.booking_code}")
    return booking


def assign_booking_code(booking: Booking) -> Booking:
    """for rows saved before booking codes existed"""
    return _insert_with_code(
        booking, "booking_code",
        lambda: generate_booking_code(booking.sender.name, booking.receiver.name, booking.date),
        CODE_INSERT_ATTEMPTS,
        exhausted="Unable to generate unique booking code",
    )


def update_booking(booking: Booking, data: dict) -> Booking:
    """booking_code is never rewritten, even when sender/receiver/date change."""
    data = dict(data)
    data.pop("booking_code", None)

    if "sender" in data:
        booking.sender = _sender(data.pop("sender"))
    receiver_changed = "receiver" in data
    if receiver_changed:
        booking.receiver = _receiver(data.pop("receiver"))
    if "receiver_branch" in data:
        booking.receiver_branch = data.pop("receiver_branch") or ""
        receiver_changed = True
    if receiver_changed:
        _check_branch(booking.receiver, booking.receiver_branch)
    if "pickup_partner" in data:
        booking.pickup_kind, booking.pickup_partner = parse_pickup(data.pop("pickup_partner"))
    if "store" in data:
        booking.store = _store_or_none(data.pop("store"))

    for field, value in data.items():
        setattr(booking, field, value)

    # dates are checked on the effective pair, stored value fills the gap
    _check_booking_rules(booking)
    booking.save()
    return booking


# ================== Containers ==================

def create_container(data: dict) -> Container:
    container = Container(**data)
    container.balance_amount = container_balance(container.booking_charge, container.advance_payment)
    container = _insert_with_code(
        container, "container_code", generate_container_code,
        settings.CONTAINER_CODE_MAX_ATTEMPTS,
        delay=settings.CONTAINER_CODE_RETRY_DELAY,
        exhausted="Unable to generate unique container code",
    )
    logger.info(f"[Container] created {container.container_code}, balance {container.balance_amount}")
    return container


def update_container(container: Container, data: dict) -> Container:
    data = dict(data)
    data.pop("container_code", None)
    if "booking_charge" in data or "advance_payment" in data:
        charge = data.get("booking_charge", container.booking_charge)
        advance = data.get("advance_payment", container.advance_payment)
        data["balance_amount"] = container_balance(charge, advance)

    for field, value in data.items():
        setattr(container, field, value)
    container.save()
    return container


# ================== Packing lists & bundles ==================

def validate_products(products) -> list[dict]:
    cleaned = []
    for index, product in enumerate(products or [], start=1):
        if not isinstance(product, dict):
            raise BadRequest(f"Product {index} is invalid")
        product_id = str(product.get("id") or "").strip()
        if not product_id:
            raise BadRequest(f"Product {index}: id is required")
        name = str(product.get("product_name") or "").strip()
        if not name:
            raise BadRequest(f"Product {index}: product_name is required")
        quantity = product.get("product_quantity")
        if isinstance(quantity, bool):
            raise BadRequest(f"Product {index}: product_quantity must be a number")
        try:
            quantity = float(quantity)
        except (TypeError, ValueError):
            raise BadRequest(f"Product {index}: product_quantity must be a number")
        if not math.isfinite(quantity):
            raise BadRequest(f"Product {index}: product_quantity must be a number")
        if quantity < 0:
            raise BadRequest(f"Product {index}: product_quantity cannot be negative")
        if quantity.is_integer():
            quantity = int(quantity)
        cleaned.append({
            "id": product_id,
            "product_name": name,
            "product_quantity": quantity,
            "fabric": str(product.get("fabric") or ""),
            "description": str(product.get("description") or ""),
        })
    return cleaned


def _booking_for_packing_list(value, exclude: Optional[PackingList] = None) -> Booking:
    booking = _fetch(Booking, value, "Invalid booking reference")
    taken = PackingList.objects.filter(booking_reference=booking)
    if exclude is not None:
        taken = taken.exclude(pk=exclude.pk)
    if taken.exists():
        raise Conflict("Packing list already exists for this booking")
    return booking


def _bundle_taken(number: str) -> Conflict:
    return Conflict(f"Bundle number {number} already exists for this packing list")


def _create_bundles(packing_list: PackingList, bundles: list[dict]) -> list[Bundle]:
    for index, item in enumerate(bundles, start=1):
        if not str(item.get("bundle_number") or "").strip():
            raise BadRequest(f"Bundle {index}: bundle_number is required")
        if item.get("quantity") is None:
            raise BadRequest(f"Bundle {index}: quantity is required")

    numbers = [str(b["bundle_number"]) for b in bundles]
    seen = set()
    for number in numbers:
        if number in seen:
            raise _bundle_taken(number)
        seen.add(number)

    created = []
    for item in bundles:
        fields = {k: v for k, v in item.items() if k != "products"}
        fields["bundle_number"] = str(fields["bundle_number"])
        created.append(Bundle.objects.create(
            packing_list=packing_list,
            products=validate_products(item.get("products")),
            **fields,
        ))
    return created


@transaction.atomic
def create_packing_list(data: dict) -> PackingList:
    data = dict(data)
    bundles = data.pop("bundles", None) or []
    booking = _booking_for_packing_list(data.pop("booking_reference"))

    packing_list = PackingList(booking_reference=booking, **data)
    _insert_with_code(
        packing_list, "packing_list_code", generate_packing_list_code,
        CODE_INSERT_ATTEMPTS, exhausted="Unable to generate unique packing list code",
    )
    _create_bundles(packing_list, bundles)
    logger.info(f"[PackingList] created {packing_list.packing_list_code} with {len(bundles)} bundles")
    return packing_list


@transaction.atomic
def update_packing_list(packing_list: PackingList, data: dict) -> PackingList:
    """bundles, when present, replace every existing bundle of the list."""
    data = dict(data)
    data.pop("packing_list_code", None)
    bundles = data.pop("bundles", None)

    if "booking_reference" in data:
        value = data.pop("booking_reference")
        if _to_pk(value, "Invalid booking reference") != packing_list.booking_reference_id:
            packing_list.booking_reference = _booking_for_packing_list(value, exclude=packing_list)

    for field, value in data.items():
        setattr(packing_list, field, value)
    packing_list.save()

    if bundles is not None:
        removed, _ = packing_list.bundles.all().delete()
        _create_bundles(packing_list, bundles)
        logger.info(f"[PackingList] {packing_list.packing_list_code}: replaced {removed} bundles with {len(bundles)}")
    return packing_list


def delete_packing_list(packing_list: PackingList):
    if packing_list.packing_status == PACKING_COMPLETED:
        raise BadRequest("Cannot delete completed packing lists")
    with transaction.atomic():
        count = packing_list.bundles.count()
        code = packing_list.packing_list_code
        packing_list.delete()
    logger.info(f"[PackingList] deleted {code} and {count} bundles")


def _check_bundle_number(packing_list: PackingList, number: str, exclude: Optional[Bundle] = None):
    clash = Bundle.objects.filter(packing_list=packing_list, bundle_number=number)
    if exclude is not None:
        clash = clash.exclude(pk=exclude.pk)
    if clash.exists():
        raise _bundle_taken(number)


def _save_bundle(bundle: Bundle):
    try:
        with transaction.atomic():
            bundle.save()
    except IntegrityError:
        if Bundle.objects.filter(packing_list_id=bundle.packing_list_id, bundle_number=bundle.bundle_number) \
                .exclude(pk=bundle.pk).exists():
            raise _bundle_taken(bundle.bundle_number)
        raise
    return bundle


def create_bundle(data: dict) -> Bundle:
    data = dict(data)
    packing_list = _fetch(PackingList, data.pop("packing_list"), "Invalid packing list ID")
    data["bundle_number"] = str(data["bundle_number"])
    _check_bundle_number(packing_list, data["bundle_number"])
    data["products"] = validate_products(data.get("products"))
    return _save_bundle(Bundle(packing_list=packing_list, **data))


def update_bundle(bundle: Bundle, data: dict) -> Bundle:
    data = dict(data)
    if "packing_list" in data:
        bundle.packing_list = _fetch(PackingList, data.pop("packing_list"), "Invalid packing list ID")
    if "bundle_number" in data:
        data["bundle_number"] = str(data["bundle_number"])
    if "products" in data:
        data["products"] = validate_products(data["products"])

    for field, value in data.items():
        setattr(bundle, field, value)
    _check_bundle_number(bundle.packing_list, bundle.bundle_number, exclude=bundle)
    return _save_bundle(bundle)


# ================== Ready to ship ==================

def ensure_ready_to_ship(bundle: Bundle, verb: str = "viewed"):
    if bundle.status != PACKING_COMPLETED:
        raise BadRequest(f"Bundle is not in completed status and cannot be {verb} in Ready to Ship")


def update_ready_to_ship(bundle: Bundle, data: dict) -> Bundle:
    """
    Containers only stay on bundles that are stuffed or dispatched. Any
    update whose incoming ready_to_ship_status is neither clears the container.
    """
    ensure_ready_to_ship(bundle, "updated")
    data = dict(data)
    container_ref = data.pop("container", None)
    incoming = data.get("ready_to_ship_status")

    if "bundle_number" in data:
        data["bundle_number"] = str(data["bundle_number"])
        _check_bundle_number(bundle.packing_list, data["bundle_number"], exclude=bundle)
    if "products" in data:
        data["products"] = validate_products(data["products"])

    for field, value in data.items():
        setattr(bundle, field, value)

    if incoming in Bundle.LOADED_STATES:
        if container_ref not in (None, ""):
            bundle.container = _fetch(Container, container_ref, "Invalid container ID")
    else:
        bundle.container = None

    return _save_bundle(bundle)


# ================== Pickup assignments ==================

def _lr_numbers(items) -> list[dict]:
    if not items:
        raise BadRequest("At least one LR number is required")
    return [
        {"lr_number": str(item["lr_number"]), "status": item.get("status") or PickupAssign.LR_NOT_COLLECTED}
        for item in items
    ]


def save_pickup_assign(data: dict, instance: Optional[PickupAssign] = None) -> PickupAssign:
    assignment = instance or PickupAssign()
    data = dict(data)
    if "transport_partner" in data:
        data["transport_partner"] = _fetch(
            PickupPartner, data["transport_partner"], "Transport partner not found", error=NotFound
        )
    if instance is None or "lr_numbers" in data:
        data["lr_numbers"] = _lr_numbers(data.get("lr_numbers"))

    for field, value in data.items():
        setattr(assignment, field, value)
    assignment.save()
    return assignment


def update_lr_status(assignment: PickupAssign, lr_number, status) -> PickupAssign:
    if not lr_number or not status:
        raise BadRequest("LR number and status are required")
    if status not in PickupAssign.LR_STATUSES:
        raise BadRequest('Invalid status. Must be "Collected" or "Not Collected"')

    with transaction.atomic():
        assignment = PickupAssign.objects.select_for_update().get(pk=assignment.pk)
        for entry in assignment.lr_numbers:
            if entry.get("lr_number") == str(lr_number):
                entry["status"] = status
                break
        else:
            raise NotFound("LR number not found in this assignment")
        assignment.save(update_fields=["lr_numbers"])
    return assignment


# ================== Price listings ==================

def save_price_listing(data: dict, instance: Optional[PriceListing] = None) -> PriceListing:
    listing = instance or PriceListing()
    data = dict(data)
    if "delivery_partner" in data and data["delivery_partner"] is not None:
        data["delivery_partner"] = _fetch(DeliveryPartner, data["delivery_partner"], "Invalid delivery partner selected")

    for field, value in data.items():
        setattr(listing, field, value)
    if instance is None or "amount" in data or "delivery_partner" in data:
        listing.total_amount = price_listing_total(listing.amount, listing.delivery_partner)
    listing.save()
    return listing


# ================== Stores ==================

def save_store(serializer, instance: Optional[Store] = None) -> Store:
    code = serializer.validated_data.get("code")
    if code:
        clash = Store.objects.filter(code=code)
        if instance is not None:
            clash = clash.exclude(pk=instance.pk)
        if clash.exists():
            raise Conflict("Store with this code already exists")
    try:
        with transaction.atomic():
            return serializer.save()
    except IntegrityError:
        raise Conflict("Store with this code already exists")


# ================== Reminders ==================

def _reminder_recipient(reminder: Reminder) -> str:
    if reminder.whatsapp_number:
        return reminder.whatsapp_number
    if reminder.customer_id and reminder.customer.whatsapp_number:
        return reminder.customer.whatsapp_number
    return settings.REMINDER_WHATSAPP_TO


def dispatch_reminder_whatsapp(reminder: Reminder) -> whatsapp.SendResult:
    """One send attempt; the outcome is written to the reminder, never raised."""
    to_number = _reminder_recipient(reminder)
    if not to_number:
        result = whatsapp.SendResult(False, error="No WhatsApp number available for this reminder")
    else:
        result = whatsapp.send_reminder_message(to_number, reminder.purpose, reminder.description, reminder.date)

    if result.success:
        reminder.whatsapp_sent = True
        reminder.whatsapp_sent_at = timezone.now()
        reminder.whatsapp_error = ""
        reminder.whatsapp_message_sid = result.sid or ""
    else:
        reminder.whatsapp_error = result.error or "Unknown error"
        logger.warning(f"[Reminder] WhatsApp not sent for reminder {reminder.pk}: {reminder.whatsapp_error}")
    reminder.save(update_fields=["whatsapp_sent", "whatsapp_sent_at", "whatsapp_error", "whatsapp_message_sid"])
    return result


def save_reminder(data: dict, instance: Optional[Reminder] = None):
    """Returns (reminder, send result or None when no send was attempted)."""
    reminder = instance or Reminder()
    was_enabled = bool(instance is not None and instance.whatsapp)
    data = dict(data)
    if "customer" in data and data["customer"] is not None:
        data["customer"] = _fetch(Customer, data["customer"], "Customer not found")

    for field, value in data.items():
        setattr(reminder, field, value)
    reminder.save()

    result = None
    if reminder.whatsapp and (instance is None or not was_enabled or not reminder.whatsapp_sent):
        result = dispatch_reminder_whatsapp(reminder)
    return reminder, result
