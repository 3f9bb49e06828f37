import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('distributors', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('pack_quantity', models.DecimalField(decimal_places=3, help_text='Size of one pack, e.g. 500 for a 500 ml pouch', max_digits=10)),
                ('pack_unit', models.CharField(choices=[('ml', 'Millilitre'), ('liter', 'Litre'), ('gm', 'Gram'), ('kg', 'Kilogram')], max_length=10)),
                ('cost_per_pack', models.DecimalField(blank=True, decimal_places=2, help_text='Direct price of one pack (tub/crate)', max_digits=10, null=True)),
                ('cost_per_packet', models.DecimalField(blank=True, decimal_places=2, help_text='Price of one sub-unit packet', max_digits=10, null=True)),
                ('packets_per_pack', models.PositiveIntegerField(blank=True, help_text='Sub-unit packets in one pack', null=True)),
                ('image_url', models.CharField(blank=True, default='', max_length=500)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('distributor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='products', to='distributors.distributor')),
            ],
            options={
                'ordering': ['-id'],
            },
        ),
    ]
