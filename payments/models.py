from django.conf import settings
from django.db import models
from distributors.models import Distributor


class Payment(models.Model):
    METHOD_CHOICES = (
        ('Cash', 'Cash'),
        ('PhonePe', 'PhonePe'),
        ('GooglePay', 'Google Pay'),
        ('NetBanking', 'Net Banking'),
        ('BankTransfer', 'Bank Transfer'),
    )
    distributor = models.ForeignKey(Distributor, on_delete=models.PROTECT, related_name='payments')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_date = models.DateField()
    payment_method = models.CharField(max_length=20, choices=METHOD_CHOICES)
    receipt_image = models.CharField(max_length=500, blank=True, default='', help_text='Path or URL of the uploaded receipt')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='payments_recorded')
    is_void = models.BooleanField(default=False, help_text='Voided payments no longer count towards the balance.')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-payment_date', '-created_at']

    def __str__(self):
        return f"{self.payment_method} {self.amount} from {self.distributor}"
