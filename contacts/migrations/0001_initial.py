from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ContactDetails',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('admin_name', models.CharField(max_length=255)),
                ('admin_contact', models.CharField(max_length=50)),
                ('admin_email', models.EmailField(max_length=254)),
                ('admin_address', models.TextField()),
                ('staff_name', models.CharField(max_length=255)),
                ('staff_contact', models.CharField(max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name_plural': 'contact details',
                'indexes': [models.Index(fields=['admin_name', 'staff_name'], name='contact_admin_staff_idx')],
            },
        ),
    ]
