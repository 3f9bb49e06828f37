import logging
from decimal import InvalidOperation

from django.db import transaction
from django.utils import timezone

from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.money import MAX_AMOUNT, fits_money_field, round_money, to_decimal
from wallet import services as ledger

from .models import Payment

logger = logging.getLogger(__name__)

PAYMENT_METHODS = [choice[0] for choice in Payment.METHOD_CHOICES]


def normalize_method(method):
    """Accept the display spelling too: 'Google Pay' -> 'GooglePay'."""
    if not isinstance(method, str):
        return None
    compact = method.replace(' ', '')
    for choice in PAYMENT_METHODS:
        if choice.lower() == compact.lower():
            return choice
    return None


def get_payment(payment_id):
    try:
        return Payment.objects.select_related('distributor').get(pk=payment_id, is_void=False)
    except (Payment.DoesNotExist, ValueError, TypeError):
        raise NotFoundError('Payment not found.')


def create_payment(actor, distributor_id, amount, payment_method, payment_date=None, receipt_image=''):
    """Record an account-level payment from a distributor. Not tied to any bill."""
    distributor = ledger.get_distributor(distributor_id)
    try:
        amount = to_decimal(amount)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError({'amount': 'Amount must be a number.'})
    if not amount.is_finite() or amount <= 0:
        raise ValidationError({'amount': 'Payment amount must be positive.'})
    if not fits_money_field(amount):
        raise ValidationError({'amount': f'Payment amount must not exceed {MAX_AMOUNT}.'})
    amount = round_money(amount)
    if amount <= 0:
        raise ValidationError({'amount': 'Payment amount must be positive.'})
    method = normalize_method(payment_method)
    if method is None:
        raise ValidationError({'payment_method': f'Payment method must be one of {", ".join(PAYMENT_METHODS)}.'})

    with transaction.atomic():
        payment = Payment.objects.create(
            distributor=distributor,
            amount=amount,
            payment_date=payment_date or timezone.localdate(),
            payment_method=method,
            receipt_image=receipt_image or '',
            created_by_id=actor.user_id,
        )
        ledger.post_payment(payment)

    logger.info("Payment of %s (%s) recorded for distributor %s by %s",
                payment.amount, method, distributor.pk, actor.name)
    return payment


def delete_payment(actor, payment):
    """Void a payment; the distributor's balance goes back up by its amount."""
    if payment.is_void:
        raise ConflictError('Payment is already void.')
    with transaction.atomic():
        payment.is_void = True
        payment.save(update_fields=['is_void', 'updated_at'])
        ledger.reverse_payment(payment)
    logger.info("Payment %s of %s voided by %s", payment.pk, payment.amount, actor.name)
    return payment
