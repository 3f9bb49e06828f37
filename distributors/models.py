from django.db import models

class Distributor(models.Model):
    PENDING = 'pending'
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    STATUS_CHOICES = (
        (PENDING, 'Pending'),
        (ACTIVE, 'Active'),
        (INACTIVE, 'Inactive'),
    )
    distributor_name = models.CharField(max_length=255)
    company_name = models.CharField(max_length=255)
    contact = models.CharField(max_length=255, blank=True, default='')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.distributor_name} ({self.company_name})"
