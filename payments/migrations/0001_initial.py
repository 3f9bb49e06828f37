import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('distributors', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('payment_date', models.DateField()),
                ('payment_method', models.CharField(choices=[('Cash', 'Cash'), ('PhonePe', 'PhonePe'), ('GooglePay', 'Google Pay'), ('NetBanking', 'Net Banking'), ('BankTransfer', 'Bank Transfer')], max_length=20)),
                ('receipt_image', models.CharField(blank=True, default='', help_text='Path or URL of the uploaded receipt', max_length=500)),
                ('is_void', models.BooleanField(default=False, help_text='Voided payments no longer count towards the balance.')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='payments_recorded', to=settings.AUTH_USER_MODEL)),
                ('distributor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='payments', to='distributors.distributor')),
            ],
            options={
                'ordering': ['-payment_date', '-created_at'],
            },
        ),
    ]
