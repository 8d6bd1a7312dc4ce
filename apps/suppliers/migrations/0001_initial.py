from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Supplier',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(help_text='Supplier company name (unique)', max_length=100, unique=True)),
                ('contact_name', models.CharField(blank=True, help_text='Primary contact person', max_length=50)),
                ('contact_phone', models.CharField(blank=True, help_text='Primary contact phone', max_length=20)),
                ('address', models.TextField(blank=True, help_text='Business address')),
                ('status', models.CharField(choices=[('active', 'Active'), ('blocked', 'Blocked'), ('pending', 'Pending Review')], default='active', help_text='Blocked suppliers cannot receive new orders', max_length=20)),
                ('rating', models.DecimalField(decimal_places=1, default=Decimal('5.0'), help_text='Performance rating from 0.0 to 5.0', max_digits=2, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('5'))])),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['status'], name='suppliers_s_status_0c1e5a_idx')],
            },
        ),
    ]
