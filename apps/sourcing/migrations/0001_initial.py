from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('suppliers', '0001_initial'),
        ('materials', '0001_initial'),
        ('orders', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Inquiry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('inquiry_number', models.CharField(help_text='IQ + yyyymm + 4-digit suffix', max_length=20, unique=True)),
                ('title', models.CharField(help_text='Short description of what is being sourced', max_length=200)),
                ('description', models.TextField(blank=True, help_text='Requirements, quantities, quality level')),
                ('deadline', models.DateField(blank=True, help_text='Date by which quotations are due', null=True)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('published', 'Published'), ('closed', 'Closed')], db_index=True, default='draft', max_length=20)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='inquiries', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'verbose_name_plural': 'inquiries',
            },
        ),
        migrations.CreateModel(
            name='Quotation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('quantity', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('unit_price', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('delivery_days', models.PositiveIntegerField(blank=True, help_text='Lead time in days from acceptance', null=True)),
                ('valid_until', models.DateField(blank=True, help_text='Offer expiry date', null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('accepted', 'Accepted'), ('rejected', 'Rejected')], db_index=True, default='pending', max_length=20)),
                ('reject_reason', models.TextField(blank=True)),
                ('inquiry', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='quotations', to='sourcing.inquiry')),
                ('material', models.ForeignKey(blank=True, help_text='Material quoted (required before the quotation can be accepted)', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='quotations', to='materials.material')),
                ('order', models.OneToOneField(blank=True, help_text='Purchase order created when this quotation was accepted', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='source_quotation', to='orders.order')),
                ('submitted_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='quotations', to=settings.AUTH_USER_MODEL)),
                ('supplier', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='quotations', to='suppliers.supplier')),
            ],
            options={
                'ordering': ['unit_price', 'created_at'],
                'constraints': [models.UniqueConstraint(fields=('inquiry', 'supplier'), name='unique_quotation_per_supplier')],
            },
        ),
    ]
