from django.db import models
from distributors.models import Distributor
from billing.models import Bill
from payments.models import Payment


class LedgerEntry(models.Model):
    """
    Append-only posting against a distributor's balance.

    Bills post positive amounts (owed by the distributor), payments post
    negative amounts. A reversal negates an earlier posting; entries are
    never edited or removed.
    """
    BILL = 'bill'
    BILL_REVERSAL = 'bill_reversal'
    PAYMENT = 'payment'
    PAYMENT_REVERSAL = 'payment_reversal'
    ENTRY_TYPE_CHOICES = (
        (BILL, 'Bill'),
        (BILL_REVERSAL, 'Bill reversal'),
        (PAYMENT, 'Payment'),
        (PAYMENT_REVERSAL, 'Payment reversal'),
    )
    distributor = models.ForeignKey(Distributor, on_delete=models.PROTECT, related_name='ledger_entries')
    entry_type = models.CharField(max_length=20, choices=ENTRY_TYPE_CHOICES)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    bill = models.ForeignKey(Bill, on_delete=models.PROTECT, null=True, blank=True, related_name='ledger_entries')
    payment = models.ForeignKey(Payment, on_delete=models.PROTECT, null=True, blank=True, related_name='ledger_entries')
    note = models.CharField(max_length=255, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']
        verbose_name_plural = 'Ledger entries'

    def __str__(self):
        return f"{self.entry_type} {self.amount} ({self.distributor_id})"
