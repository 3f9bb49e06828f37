from django.db import models
from distributors.models import Distributor
from core.money import round_money


class Product(models.Model):
    PACK_UNIT_CHOICES = (
        ('ml', 'Millilitre'),
        ('liter', 'Litre'),
        ('gm', 'Gram'),
        ('kg', 'Kilogram'),
    )
    distributor = models.ForeignKey(Distributor, on_delete=models.CASCADE, related_name='products')
    name = models.CharField(max_length=255)
    pack_quantity = models.DecimalField(max_digits=10, decimal_places=3, help_text='Size of one pack, e.g. 500 for a 500 ml pouch')
    pack_unit = models.CharField(max_length=10, choices=PACK_UNIT_CHOICES)
    cost_per_pack = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True, help_text='Direct price of one pack (tub/crate)')
    cost_per_packet = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True, help_text='Price of one sub-unit packet')
    packets_per_pack = models.PositiveIntegerField(null=True, blank=True, help_text='Sub-unit packets in one pack')
    image_url = models.CharField(max_length=500, blank=True, default='')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-id']

    def __str__(self):
        return f"{self.name} ({self.pack_quantity} {self.pack_unit})"

    @staticmethod
    def derive_price_per_pack(cost_per_pack, cost_per_packet, packets_per_pack):
        """Per-pack price, falling back to packet price x packets per pack. None if underivable."""
        if cost_per_pack:
            return round_money(cost_per_pack)
        if cost_per_packet and packets_per_pack:
            return round_money(cost_per_packet * packets_per_pack)
        return None

    @property
    def price_per_pack(self):
        return self.derive_price_per_pack(self.cost_per_pack, self.cost_per_packet, self.packets_per_pack)

    def calculate_cost(self, number_of_packs=1):
        return round_money((self.price_per_pack or 0) * number_of_packs)
