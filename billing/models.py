from django.db import models
from distributors.models import Distributor
from orders.models import Order
from products.models import Product
import datetime


class Bill(models.Model):
    distributor = models.ForeignKey(Distributor, on_delete=models.PROTECT, related_name='bills')
    order = models.OneToOneField(Order, on_delete=models.PROTECT, related_name='bill')
    bill_number = models.CharField(max_length=30, unique=True, editable=False)
    bill_date = models.DateField()
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=0, help_text='Value before damage adjustments.')
    total_damaged_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    # Finalized bills cannot be regenerated or voided until unlocked.
    locked = models.BooleanField(default=False)
    is_void = models.BooleanField(default=False, help_text='Voided bills are excluded from balances and reports.')

    updated_by_role = models.CharField(max_length=20, blank=True, default='')
    updated_by_id = models.PositiveBigIntegerField(null=True, blank=True)
    updated_by_name = models.CharField(max_length=150, blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def save(self, *args, **kwargs):
        if not self.bill_number:
            prefix = 'BILL-' + datetime.datetime.now().strftime('%Y%m%d')
            last_bill = Bill.objects.filter(bill_number__startswith=prefix).order_by('id').last()
            if not last_bill:
                self.bill_number = f'{prefix}-0001'
            else:
                try:
                    last_number = int(last_bill.bill_number.split('-')[-1])
                    self.bill_number = f'{prefix}-{str(last_number + 1).zfill(4)}'
                except (ValueError, IndexError):
                    self.bill_number = f'{prefix}-0001'
        super(Bill, self).save(*args, **kwargs)

    def __str__(self):
        return self.bill_number

    @property
    def has_damage(self):
        return self.total_damaged_amount > 0


class BillItem(models.Model):
    bill = models.ForeignKey(Bill, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, blank=True)
    product_name = models.CharField(max_length=255)
    ordered_quantity = models.DecimalField(max_digits=10, decimal_places=3)
    damaged_quantity = models.DecimalField(max_digits=10, decimal_places=3, default=0)
    quantity = models.DecimalField(max_digits=10, decimal_places=3, help_text='Billable quantity after damage.')
    unit = models.CharField(max_length=10)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    line_total = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"
