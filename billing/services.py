import logging
from collections import defaultdict

from django.db import transaction
from django.utils import timezone

from accounts.context import SYSTEM
from core.bulk import run_bulk
from core.exceptions import ConflictError, NotFoundError
from core.money import ZERO, round_money
from orders.models import Order
from wallet import services as ledger

from .models import Bill, BillItem

logger = logging.getLogger(__name__)


def get_bill(bill_id):
    try:
        return Bill.objects.select_related('distributor', 'order').get(pk=bill_id, is_void=False)
    except (Bill.DoesNotExist, ValueError, TypeError):
        raise NotFoundError('Bill not found.')


def build_bill_lines(order):
    """
    Price every order line net of damage.

    Damage for a product is consumed line by line, so it never reduces a
    line below zero and is never counted twice when a product appears on
    more than one line. Returns (lines, subtotal, damaged, total); the sums
    keep full precision and are rounded once.
    """
    damage = defaultdict(lambda: ZERO)
    for record in order.damaged_products.all():
        if record.product_id is not None:
            damage[record.product_id] += record.damaged_quantity

    lines = []
    subtotal = damaged_value = total = ZERO
    for item in order.items.select_related('product').all():
        applied = min(damage[item.product_id], item.quantity)
        damage[item.product_id] -= applied
        billable = item.quantity - applied
        line_value = item.unit_price * billable

        subtotal += item.unit_price * item.quantity
        damaged_value += item.unit_price * applied
        total += line_value
        lines.append({
            'product': item.product,
            'product_name': item.product.name,
            'ordered_quantity': item.quantity,
            'damaged_quantity': applied,
            'quantity': billable,
            'unit': item.unit,
            'price': item.unit_price,
            'line_total': round_money(line_value),
        })
    return lines, round_money(subtotal), round_money(damaged_value), round_money(total)


def upsert_bill_from_order(actor, order):
    """
    Create the bill for a delivered order, or regenerate its unlocked bill.

    Regenerating replaces the items and posts a reversal of the old total
    followed by the new total to the ledger.
    """
    if order.is_void or order.status != Order.DELIVERED:
        raise ConflictError('Only delivered orders can be billed.')

    lines, subtotal, damaged_value, total = build_bill_lines(order)

    with transaction.atomic():
        bill = Bill.objects.select_for_update().filter(order=order).first()
        if bill is not None and bill.locked:
            raise ConflictError('Bill is locked.')

        if bill is None:
            bill = Bill(distributor_id=order.distributor_id, order=order)
            was_active = False
        else:
            was_active = not bill.is_void
            if was_active:
                ledger.reverse_bill(bill, note=f'Regenerated bill {bill.bill_number}')
            bill.items.all().delete()

        bill.bill_date = timezone.localdate()
        bill.subtotal = subtotal
        bill.total_damaged_amount = damaged_value
        bill.total_amount = total
        bill.is_void = False
        for attr, value in actor.audit().items():
            setattr(bill, attr, value)
        bill.save()

        BillItem.objects.bulk_create([BillItem(bill=bill, **line) for line in lines])
        ledger.post_bill(bill)

    logger.info(
        "Bill %s %s for order %s: total %s (damage %s)",
        bill.bill_number, 'regenerated' if was_active else 'generated',
        order.order_number, total, damaged_value,
    )
    return bill


def lock_bill(actor, bill):
    if bill.is_void:
        raise ConflictError('Voided bills cannot be locked.')
    if bill.locked:
        raise ConflictError('Bill is already locked.')
    bill.locked = True
    for attr, value in actor.audit().items():
        setattr(bill, attr, value)
    bill.save()
    logger.info("Bill %s locked by %s", bill.bill_number, actor.name)
    return bill


def unlock_bill(actor, bill):
    if not bill.locked:
        raise ConflictError('Bill is not locked.')
    bill.locked = False
    for attr, value in actor.audit().items():
        setattr(bill, attr, value)
    bill.save()
    logger.info("Bill %s unlocked by %s", bill.bill_number, actor.name)
    return bill


def delete_bill(actor, bill):
    """Void a bill. The order keeps its delivered state."""
    if bill.locked:
        raise ConflictError('Bill is locked; unlock it before deleting.')
    if bill.is_void:
        raise ConflictError('Bill is already void.')
    with transaction.atomic():
        bill.is_void = True
        for attr, value in actor.audit().items():
            setattr(bill, attr, value)
        bill.save()
        ledger.reverse_bill(bill)
    logger.info("Bill %s voided by %s", bill.bill_number, actor.name)
    return bill


def unbilled_orders():
    """Delivered orders that never got a bill, e.g. after a failed delivery request."""
    return Order.objects.filter(
        status=Order.DELIVERED, is_void=False, bill__isnull=True
    ).order_by('id')


def reconcile_unbilled_orders(actor=SYSTEM):
    order_ids = list(unbilled_orders().values_list('id', flat=True))

    def bill_order(order_id):
        upsert_bill_from_order(actor, Order.objects.get(pk=order_id))

    outcome = run_bulk(order_ids, bill_order)
    if order_ids:
        logger.info("Reconciliation billed %s of %s unbilled orders", outcome['succeeded'], len(order_ids))
    return outcome
