from django.contrib.auth.models import AbstractUser
from django.db import models
from distributors.models import Distributor

class User(AbstractUser):
    ADMIN = 'admin'
    STAFF = 'staff'
    DISTRIBUTOR = 'distributor'
    ROLE_CHOICES = (
        (ADMIN, 'Admin'),
        (STAFF, 'Staff'),
        (DISTRIBUTOR, 'Distributor'),
    )
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=STAFF)
    phone = models.CharField(max_length=20, blank=True, default='')
    distributor = models.ForeignKey(Distributor, on_delete=models.SET_NULL, null=True, blank=True, related_name='users')

    @property
    def display_name(self):
        return self.get_full_name() or self.username

    def __str__(self):
        return f"{self.username} ({self.role})"
