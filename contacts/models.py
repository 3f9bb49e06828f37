from django.db import models


class ContactDetails(models.Model):
    """Who distributors and staff should call: the admin office and the staff on duty."""
    admin_name = models.CharField(max_length=255)
    admin_contact = models.CharField(max_length=50)
    admin_email = models.EmailField()
    admin_address = models.TextField()
    staff_name = models.CharField(max_length=255)
    staff_contact = models.CharField(max_length=50)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'contact details'
        indexes = [models.Index(fields=['admin_name', 'staff_name'], name='contact_admin_staff_idx')]

    def save(self, *args, **kwargs):
        self.admin_email = self.admin_email.strip().lower()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.admin_name} / {self.staff_name}"
