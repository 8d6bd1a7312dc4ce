"""
Management command to load demo data: users for every role, suppliers,
materials, orders at each lifecycle stage and two inquiries.

Orders are advanced through OrderService so every one has a complete
timeline.
"""
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from apps.materials.models import Material
from apps.orders.services import OrderService
from apps.sourcing.services import SourcingService
from apps.suppliers.models import Supplier, SupplierStatus
from users.models import Role, User

SUPPLIERS = [
    # name, contact, phone, address, status, rating
    ('Huawei Machinery', 'Manager Zhang', '13800138001', 'Bao\'an, Shenzhen', SupplierStatus.ACTIVE, '4.8'),
    ('Lixun Electronics', 'Director Li', '13800138002', 'Chang\'an, Dongguan', SupplierStatus.ACTIVE, '4.5'),
    ('Yueli Materials', 'Mr. Wang', '13800138003', 'Tianhe, Guangzhou', SupplierStatus.ACTIVE, '4.2'),
    ('Huaxin Hardware', 'Manager Liu', '13800138004', 'Shunde, Foshan', SupplierStatus.BLOCKED, '3.5'),
]

MATERIALS = [
    # code, name, specification, unit, category
    ('BJ-001', 'Precision Bearing', 'P0 grade', 'pcs', 'Bearings'),
    ('DJ-002', 'Motor', '2.2kW three-phase asynchronous', 'unit', 'Motors'),
    ('DL-003', 'Cable', '3*16+1*10', 'm', 'Cables'),
    ('SS-004', 'Stainless Steel Sheet', '304 3mm', 'm2', 'Sheet'),
    ('JG-005', 'Fastener Kit', 'M3-M20', 'set', 'Hardware'),
    ('KF-006', 'Controller', 'Programmable PLC', 'pcs', 'Electrical'),
    ('DM-007', 'Linear Guide', 'Linear rail', 'm', 'Transmission'),
    ('CJ-008', 'Sensor', 'Photoelectric', 'pcs', 'Sensors'),
]

# supplier index, material code, quantity, unit price, days until delivery, actions to apply
ORDERS = [
    (0, 'BJ-001', '500', '25.00', 30, []),
    (1, 'DJ-002', '10', '2500.00', 35, ['confirm']),
    (0, 'DL-003', '1000', '45.00', 25, ['confirm', 'ship']),
    (2, 'SS-004', '200', '180.00', -5, ['confirm', 'ship', 'receive']),
    (1, 'KF-006', '50', '800.00', -20, ['confirm', 'ship', 'receive', 'complete']),
]


class Command(BaseCommand):
    help = 'Load SRM demo data (users, suppliers, materials, orders, inquiries)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--password',
            default='demo1234',
            help='Password for every demo user (default: demo1234)',
        )

    def handle(self, *args, **options):
        if User.objects.filter(username='admin').exists():
            raise CommandError('Demo data already present (user "admin" exists).')

        password = options['password']
        with transaction.atomic():
            self._seed(password)

        self.stdout.write(self.style.SUCCESS(
            f'Demo data loaded. Users: admin, purchaser, finance, huawei, lixun (password: {password})'
        ))

    def _seed(self, password):
        User.objects.create_superuser('admin', password=password, role=Role.ADMIN, name='Administrator')
        purchaser = User.objects.create_user('purchaser', password=password, role=Role.PURCHASER, name='Purchasing')
        User.objects.create_user('finance', password=password, role=Role.FINANCE, name='Finance')

        suppliers = []
        for name, contact, phone, address, status, rating in SUPPLIERS:
            suppliers.append(Supplier.objects.create(
                name=name,
                contact_name=contact,
                contact_phone=phone,
                address=address,
                status=status,
                rating=Decimal(rating),
            ))
            self.stdout.write(f'Supplier: {name}')

        supplier_users = {
            0: User.objects.create_user('huawei', password=password, role=Role.SUPPLIER, supplier=suppliers[0]),
            1: User.objects.create_user('lixun', password=password, role=Role.SUPPLIER, supplier=suppliers[1]),
            2: User.objects.create_user('yueli', password=password, role=Role.SUPPLIER, supplier=suppliers[2]),
        }

        materials = {}
        for code, name, specification, unit, category in MATERIALS:
            materials[code] = Material.objects.create(
                code=code, name=name, specification=specification, unit=unit, category=category,
            )
        self.stdout.write(f'Materials: {len(materials)}')

        today = timezone.localdate()
        purchasing = OrderService(purchaser)
        for supplier_index, code, quantity, price, days, actions in ORDERS:
            order = purchasing.create_order(
                supplier_id=suppliers[supplier_index].pk,
                material_id=materials[code].pk,
                quantity=quantity,
                unit_price=price,
                delivery_date=today + timedelta(days=days),
            )
            supplier_side = OrderService(supplier_users[supplier_index])
            for action in actions:
                if action == 'confirm':
                    supplier_side.confirm_order(order.pk)
                elif action == 'ship':
                    supplier_side.ship_order(order.pk, tracking_no=f'SF{order.pk:010d}')
                else:
                    getattr(purchasing, f'{action}_order')(order.pk)
            self.stdout.write(f'Order: {order.order_number} ({" -> ".join(["created"] + actions)})')

        sourcing = SourcingService(purchaser)
        bearings = sourcing.create_inquiry(
            title='Precision bearing sourcing',
            description='Long-term supply of P0 grade bearings, 500-1000 pcs per month',
            deadline=today + timedelta(days=30),
        )
        sourcing.publish_inquiry(bearings.pk)
        sourcing.create_inquiry(
            title='Motor quotation',
            description='Three-phase asynchronous motors, 2.2kW',
            deadline=today + timedelta(days=45),
        )
        self.stdout.write('Inquiries: 2')
