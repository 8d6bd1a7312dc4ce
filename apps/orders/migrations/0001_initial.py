from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import simple_history.models
from django.conf import settings
from django.db import migrations, models

ORDER_STATUS_CHOICES = [
    ('pending', 'Pending Confirmation'),
    ('confirmed', 'Confirmed'),
    ('shipped', 'Shipped'),
    ('received', 'Received'),
    ('completed', 'Completed'),
    ('cancelled', 'Cancelled'),
]

ORDER_ACTION_CHOICES = [
    ('created', 'Created'),
    ('confirmed', 'Confirmed'),
    ('shipped', 'Shipped'),
    ('received', 'Received'),
    ('completed', 'Completed'),
    ('cancelled', 'Cancelled'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('suppliers', '0001_initial'),
        ('materials', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('order_number', models.CharField(help_text='PO + yyyymm + 4-digit suffix', max_length=20, unique=True)),
                ('quantity', models.DecimalField(decimal_places=2, help_text='Quantity ordered (must be positive)', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('unit_price', models.DecimalField(blank=True, decimal_places=2, help_text='Price per unit (optional until quoted)', max_digits=12, null=True)),
                ('total_amount', models.DecimalField(decimal_places=4, default=Decimal('0'), help_text='Derived: quantity x unit_price', max_digits=26)),
                ('delivery_date', models.DateField(blank=True, help_text='Requested delivery date', null=True)),
                ('status', models.CharField(choices=ORDER_STATUS_CHOICES, db_index=True, default='pending', help_text='Lifecycle status', max_length=20)),
                ('tracking_no', models.CharField(blank=True, help_text='Carrier tracking number, set when shipped', max_length=50)),
                ('notes', models.TextField(blank=True, help_text='Order notes')),
                ('created_by', models.ForeignKey(blank=True, help_text='Purchaser who placed the order', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_orders', to=settings.AUTH_USER_MODEL)),
                ('material', models.ForeignKey(help_text='Material being purchased', on_delete=django.db.models.deletion.PROTECT, related_name='orders', to='materials.material')),
                ('supplier', models.ForeignKey(help_text='Supplier fulfilling this order', on_delete=django.db.models.deletion.PROTECT, related_name='orders', to='suppliers.supplier')),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['supplier', 'status'], name='orders_supplier_status_idx'),
                    models.Index(fields=['delivery_date'], name='orders_delivery_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OrderLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(choices=ORDER_ACTION_CHOICES, help_text='Transition name', max_length=20)),
                ('old_status', models.CharField(blank=True, choices=ORDER_STATUS_CHOICES, help_text="Status before the transition (null only for 'created')", max_length=20, null=True)),
                ('new_status', models.CharField(choices=ORDER_STATUS_CHOICES, help_text='Status after the transition', max_length=20)),
                ('remark', models.TextField(blank=True, help_text='Free-text remark')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When the transition happened')),
                ('operator', models.ForeignKey(blank=True, help_text='User who triggered the transition', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='order_logs', to=settings.AUTH_USER_MODEL)),
                ('order', models.ForeignKey(help_text='Order this entry belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='logs', to='orders.order')),
            ],
            options={
                'ordering': ['created_at', 'id'],
            },
        ),
        migrations.CreateModel(
            name='HistoricalOrder',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('created_at', models.DateTimeField(blank=True, editable=False)),
                ('updated_at', models.DateTimeField(blank=True, editable=False)),
                ('order_number', models.CharField(db_index=True, help_text='PO + yyyymm + 4-digit suffix', max_length=20)),
                ('quantity', models.DecimalField(decimal_places=2, help_text='Quantity ordered (must be positive)', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('unit_price', models.DecimalField(blank=True, decimal_places=2, help_text='Price per unit (optional until quoted)', max_digits=12, null=True)),
                ('total_amount', models.DecimalField(decimal_places=4, default=Decimal('0'), help_text='Derived: quantity x unit_price', max_digits=26)),
                ('delivery_date', models.DateField(blank=True, help_text='Requested delivery date', null=True)),
                ('status', models.CharField(choices=ORDER_STATUS_CHOICES, db_index=True, default='pending', help_text='Lifecycle status', max_length=20)),
                ('tracking_no', models.CharField(blank=True, help_text='Carrier tracking number, set when shipped', max_length=50)),
                ('notes', models.TextField(blank=True, help_text='Order notes')),
                ('history_id', models.AutoField(primary_key=True, serialize=False)),
                ('history_date', models.DateTimeField(db_index=True)),
                ('history_change_reason', models.CharField(max_length=100, null=True)),
                ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
                ('created_by', models.ForeignKey(blank=True, db_constraint=False, help_text='Purchaser who placed the order', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('material', models.ForeignKey(blank=True, db_constraint=False, help_text='Material being purchased', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='materials.material')),
                ('supplier', models.ForeignKey(blank=True, db_constraint=False, help_text='Supplier fulfilling this order', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='suppliers.supplier')),
            ],
            options={
                'verbose_name': 'historical order',
                'verbose_name_plural': 'historical orders',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
