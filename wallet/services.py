"""
Distributor balance: bills owed minus payments received.

The balance is derived on every read from the active bills and payments.
Every bill and payment also posts to the append-only ``LedgerEntry`` table,
and a snapshot cross-checks the two so drift is visible in the logs.
"""
import logging

from django.db.models import Sum

from billing.models import Bill
from core.exceptions import NotFoundError
from core.money import ZERO, round_money
from distributors.models import Distributor
from payments.models import Payment

from .models import LedgerEntry

logger = logging.getLogger(__name__)


def get_distributor(distributor_id):
    try:
        return Distributor.objects.get(pk=distributor_id)
    except (Distributor.DoesNotExist, ValueError, TypeError):
        raise NotFoundError('Distributor not found.')


def _record(distributor_id, entry_type, amount, bill=None, payment=None, note=''):
    return LedgerEntry.objects.create(
        distributor_id=distributor_id,
        entry_type=entry_type,
        amount=round_money(amount),
        bill=bill,
        payment=payment,
        note=note,
    )


def post_bill(bill):
    return _record(bill.distributor_id, LedgerEntry.BILL, bill.total_amount, bill=bill,
                   note=f'Bill {bill.bill_number}')


def reverse_bill(bill, note=''):
    return _record(bill.distributor_id, LedgerEntry.BILL_REVERSAL, -bill.total_amount, bill=bill,
                   note=note or f'Reversal of bill {bill.bill_number}')


def post_payment(payment):
    return _record(payment.distributor_id, LedgerEntry.PAYMENT, -payment.amount, payment=payment,
                   note=f'{payment.payment_method} payment')


def reverse_payment(payment, note=''):
    return _record(payment.distributor_id, LedgerEntry.PAYMENT_REVERSAL, payment.amount, payment=payment,
                   note=note or f'Reversal of {payment.payment_method} payment')


def total_billed(distributor_id):
    total = Bill.objects.filter(distributor_id=distributor_id, is_void=False).aggregate(
        total=Sum('total_amount'))['total']
    return total or ZERO


def total_paid(distributor_id):
    total = Payment.objects.filter(distributor_id=distributor_id, is_void=False).aggregate(
        total=Sum('amount'))['total']
    return total or ZERO


def ledger_balance(distributor_id):
    total = LedgerEntry.objects.filter(distributor_id=distributor_id).aggregate(total=Sum('amount'))['total']
    return round_money(total or ZERO)


def get_balance(distributor_id):
    """
    Net amount owed by the distributor.

    A negative balance means the distributor has paid more than it was
    billed (credit owed to the distributor).
    """
    get_distributor(distributor_id)
    return round_money(total_billed(distributor_id) - total_paid(distributor_id))


def get_wallet_snapshot(distributor_id):
    distributor = get_distributor(distributor_id)
    billed = total_billed(distributor.pk)
    paid = total_paid(distributor.pk)
    balance = round_money(billed - paid)
    from_ledger = ledger_balance(distributor.pk)
    consistent = balance == from_ledger
    if not consistent:
        logger.warning(
            "Ledger mismatch for distributor %s: aggregate %s, ledger %s",
            distributor.pk, balance, from_ledger,
        )
    return {
        'distributor_id': distributor.pk,
        'distributor_name': distributor.distributor_name,
        'total_billed': round_money(billed),
        'total_paid': round_money(paid),
        'wallet_balance': balance,
        'ledger_balance': from_ledger,
        'consistent': consistent,
    }
