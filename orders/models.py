from django.conf import settings
from django.db import models
from distributors.models import Distributor
from products.models import Product
import datetime


class Order(models.Model):
    PENDING = 'pending'
    DELIVERED = 'delivered'
    STATUS_CHOICES = (
        (PENDING, 'Pending'),
        (DELIVERED, 'Delivered'),
    )
    UNIT_CHOICES = (
        ('pack', 'Pack'),
        ('bucket', 'Bucket'),
        ('kg', 'Kg'),
        ('liter', 'Liter'),
        ('box', 'Box'),
        ('packet', 'Packet'),
        ('gram', 'Gram'),
    )
    distributor = models.ForeignKey(Distributor, on_delete=models.PROTECT, related_name='orders')
    order_number = models.CharField(max_length=30, unique=True, editable=False)
    order_date = models.DateField()
    delivery_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)
    # Set on delivery; a locked order can no longer be edited or re-delivered.
    locked = models.BooleanField(default=False)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    distributor_notes = models.TextField(blank=True, default='')

    ordered_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders_placed')
    ordered_by_role = models.CharField(max_length=20, blank=True, default='')
    updated_by_role = models.CharField(max_length=20, blank=True, default='')
    updated_by_id = models.PositiveBigIntegerField(null=True, blank=True)
    updated_by_name = models.CharField(max_length=150, blank=True, default='')

    is_void = models.BooleanField(default=False, help_text='Voided orders are excluded from listings and reports.')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def save(self, *args, **kwargs):
        if not self.order_number:
            prefix = 'ORD-' + datetime.datetime.now().strftime('%Y%m%d')
            last_order = Order.objects.filter(order_number__startswith=prefix).order_by('id').last()
            if not last_order:
                self.order_number = prefix + '-0001'
            else:
                last_number = int(last_order.order_number.split('-')[-1])
                self.order_number = prefix + '-' + str(last_number + 1).zfill(4)
        super(Order, self).save(*args, **kwargs)

    def __str__(self):
        return self.order_number

    @property
    def is_editable(self):
        return self.status == self.PENDING and not self.locked and not self.is_void


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='order_items')
    quantity = models.DecimalField(max_digits=10, decimal_places=3)
    unit = models.CharField(max_length=10, choices=Order.UNIT_CHOICES)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    line_total = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.product.name} ({self.order.order_number})"


class DamagedProduct(models.Model):
    """Shrinkage found at delivery. Reduces the billable quantity of the product's line."""
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='damaged_products')
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, blank=True)
    product_name = models.CharField(max_length=255)
    damaged_quantity = models.DecimalField(max_digits=10, decimal_places=3)
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.product_name} x {self.damaged_quantity} damaged"
