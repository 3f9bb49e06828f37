"""
Order placement and delivery.

Orders are created ``pending``, can be edited while pending, and move to
``delivered`` exactly once. Delivery locks the order, attaches any damage
found at the door, and generates the bill in the same transaction.
"""
import datetime
import logging
from decimal import InvalidOperation

from django.db import transaction
from django.utils import timezone

from billing.models import Bill
from billing.services import upsert_bill_from_order
from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.money import ZERO, round_money, to_decimal
from products.models import Product
from wallet.services import get_distributor

from .models import Order, OrderItem, DamagedProduct

logger = logging.getLogger(__name__)

ALLOWED_UNITS = [choice[0] for choice in Order.UNIT_CHOICES]


def get_order(order_id):
    try:
        return Order.objects.select_related('distributor').get(pk=order_id, is_void=False)
    except (Order.DoesNotExist, ValueError, TypeError):
        raise NotFoundError('Order not found.')


def _parse_quantity(value, field, index):
    try:
        quantity = to_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError({field: f'Invalid quantity at index {index}.'})
    if not quantity.is_finite():
        raise ValidationError({field: f'Invalid quantity at index {index}.'})
    return quantity


def validate_order_date(order_date):
    if not isinstance(order_date, datetime.date):
        raise ValidationError({'order_date': 'A valid order date is required.'})
    if isinstance(order_date, datetime.datetime):
        order_date = order_date.date()
    if order_date < timezone.localdate():
        raise ValidationError({'order_date': 'Orders cannot be placed for a past date.'})
    return order_date


def resolve_items(distributor, items):
    """Check every requested line against the distributor's catalog and price it."""
    if not items:
        raise ValidationError({'items': 'At least one item is required.'})
    resolved = []
    for index, item in enumerate(items):
        product_id = item.get('product')
        try:
            product = Product.objects.get(pk=product_id)
        except (Product.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f'Product not found at index {index}.')
        if product.distributor_id != distributor.pk:
            raise ValidationError({'items': f'Product "{product.name}" does not belong to this distributor.'})
        if not product.is_active:
            raise ValidationError({'items': f'Product "{product.name}" is inactive and cannot be ordered.'})

        quantity = _parse_quantity(item.get('quantity'), 'items', index)
        if quantity <= 0:
            raise ValidationError({'items': f'Quantity must be greater than 0 at index {index}.'})
        unit = item.get('unit')
        if unit not in ALLOWED_UNITS:
            raise ValidationError({'items': f'Unit must be one of {", ".join(ALLOWED_UNITS)} at index {index}.'})

        unit_price = product.price_per_pack
        if unit_price is None:
            raise ValidationError({'items': f'Product "{product.name}" has no price.'})
        resolved.append({
            'product': product,
            'quantity': quantity,
            'unit': unit,
            'unit_price': unit_price,
        })
    return resolved


def _write_items(order, resolved):
    order.items.all().delete()
    total = ZERO
    rows = []
    for line in resolved:
        value = line['unit_price'] * line['quantity']
        total += value
        rows.append(OrderItem(order=order, line_total=round_money(value), **line))
    OrderItem.objects.bulk_create(rows)
    order.total_amount = round_money(total)


def _stamp(order, actor):
    for attr, value in actor.audit().items():
        setattr(order, attr, value)


def create_order(actor, distributor_id, order_date, items):
    distributor = get_distributor(distributor_id)
    order_date = validate_order_date(order_date)
    resolved = resolve_items(distributor, items)

    with transaction.atomic():
        order = Order(
            distributor=distributor,
            order_date=order_date,
            status=Order.PENDING,
            locked=False,
            ordered_by_id=actor.user_id,
            ordered_by_role=actor.role,
        )
        _stamp(order, actor)
        order.save()
        _write_items(order, resolved)
        order.save(update_fields=['total_amount'])

    logger.info("Order %s placed for distributor %s by %s (%s items, total %s)",
                order.order_number, distributor.pk, actor.name, len(resolved), order.total_amount)
    return order


def _ensure_editable(order):
    if not order.is_editable:
        raise ConflictError('Order is locked or already delivered.')


def update_order(actor, order, order_date=None, items=None):
    _ensure_editable(order)
    if order_date == order.order_date:
        order_date = None
    if order_date is not None:
        order_date = validate_order_date(order_date)
    resolved = resolve_items(order.distributor, items) if items is not None else None

    with transaction.atomic():
        if order_date is not None:
            order.order_date = order_date
        if resolved is not None:
            _write_items(order, resolved)
        _stamp(order, actor)
        order.save()

    logger.info("Order %s updated by %s", order.order_number, actor.name)
    return order


def delete_order(actor, order):
    """
    Remove a pending order outright. A delivered order is voided instead,
    and only once its bill has been voided.
    """
    if order.status == Order.PENDING and not order.locked:
        number = order.order_number
        order.delete()
        logger.info("Pending order %s deleted by %s", number, actor.name)
        return None
    if Bill.objects.filter(order=order, is_void=False).exists():
        raise ConflictError('Order has an active bill; delete the bill before deleting the order.')
    order.is_void = True
    _stamp(order, actor)
    order.save()
    logger.info("Delivered order %s voided by %s", order.order_number, actor.name)
    return order


def resolve_damage(order, damaged_products):
    """Validate damage records against the order's own lines."""
    if not damaged_products:
        return []
    products = {item.product_id: item.product for item in order.items.select_related('product')}
    records = []
    for index, entry in enumerate(damaged_products):
        product_id = entry.get('product')
        try:
            product_id = int(product_id)
        except (ValueError, TypeError):
            raise ValidationError({'damaged_products': f'Invalid product at index {index}.'})
        if product_id not in products:
            raise ValidationError({'damaged_products': f'Product at index {index} is not part of this order.'})
        quantity = _parse_quantity(entry.get('damaged_quantity'), 'damaged_products', index)
        if quantity < 0:
            raise ValidationError({'damaged_products': f'Damaged quantity cannot be negative at index {index}.'})
        if quantity == 0:
            continue
        product = products[product_id]
        records.append(DamagedProduct(
            order=order,
            product=product,
            product_name=product.name,
            damaged_quantity=quantity,
            notes=entry.get('notes') or '',
        ))
    return records


def mark_delivered(actor, order, damaged_products=None, delivery_date=None, notes=None):
    """
    pending -> delivered. Not idempotent: a second call is a conflict.

    Returns (order, bill). The order update, damage records and bill are
    written in one transaction, so a failed bill leaves the order pending.
    """
    with transaction.atomic():
        try:
            order = Order.objects.select_for_update().get(pk=order.pk, is_void=False)
        except Order.DoesNotExist:
            raise NotFoundError('Order not found.')
        if order.status == Order.DELIVERED or order.locked:
            raise ConflictError('Order already delivered or locked.')

        records = resolve_damage(order, damaged_products)
        order.status = Order.DELIVERED
        order.locked = True
        order.delivery_date = delivery_date or order.delivery_date or timezone.localdate()
        if notes:
            order.distributor_notes = notes
        _stamp(order, actor)
        order.save()
        DamagedProduct.objects.bulk_create(records)

        bill = upsert_bill_from_order(actor, order)

    logger.info("Order %s delivered by %s (%s damage records), bill %s",
                order.order_number, actor.name, len(records), bill.bill_number)
    return order, bill


def tomorrow_pending_orders(distributor_id):
    tomorrow = timezone.localdate() + datetime.timedelta(days=1)
    return Order.objects.filter(
        distributor_id=distributor_id,
        status=Order.PENDING,
        is_void=False,
        order_date=tomorrow,
    ).prefetch_related('items__product')
