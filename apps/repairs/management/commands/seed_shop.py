"""
Management command to seed a shop with demo records.

Usage:
    python manage.py seed_shop

This creates:
- 2 users (admin, clerk)
- 3 customers
- 2 staff members
- 4 catalog repair services
- 4 inventory items with opening stock
- 1 service order with a deposit, taken through the repairs services
"""

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import User, UserRole
from apps.catalog.models import RepairService
from apps.customers.models import Customer
from apps.inventory.models import Item, StockMovementType
from apps.inventory.services import record_stock_movement
from apps.repairs.services import add_part, create_order
from apps.staff.models import StaffMember


class Command(BaseCommand):
    help = 'Create demo users, customers, catalog, inventory and one service order'

    def add_arguments(self, parser):
        parser.add_argument(
            '--admin-password',
            default='admin123',
            help='Password for the admin account (default: admin123)',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write('Seeding shop data...')

        admin, clerk = self.create_users(options['admin_password'])
        customers = self.create_customers()
        staff = self.create_staff(clerk)
        services = self.create_services()
        items = self.create_items(admin)

        if not customers[0].service_orders.exists():
            order = create_order(
                customer_id=customers[0].id,
                assigned_staff_id=staff[0].id,
                actor=clerk,
                shoe_brand='Dr. Martens',
                shoe_color='Black',
                shoe_size='42',
                shoe_type='Boots',
                problem_desc='Worn heels, loose stitching on left toe',
                lines=[
                    {'repair_service_id': services[0].id, 'qty': 2},
                    {'description': 'Stitch repair', 'price': '4.50', 'qty': 1},
                ],
                deposit_amount='10.00',
                deposit_note='Deposit at intake',
            )
            add_part(order_id=order.id, item_id=items[0].id, qty=2, unit_price='3.00', actor=clerk)
            self.stdout.write(f'  Service order {order.code}')

        self.stdout.write(self.style.SUCCESS('Shop data seeded successfully!'))
        self.stdout.write('')
        self.stdout.write('Accounts:')
        self.stdout.write(f"  admin / {options['admin_password']} (ADMIN)")
        self.stdout.write('  clerk / clerk123 (STAFF)')

    def create_users(self, admin_password):
        admin = User.objects.filter(username='admin').first()
        if admin is None:
            admin = User.objects.create_superuser(
                username='admin',
                password=admin_password,
                display_name='Shop Owner',
            )
        clerk = User.objects.filter(username='clerk').first()
        if clerk is None:
            clerk = User.objects.create_user(
                username='clerk',
                password='clerk123',
                display_name='Front Desk',
                role=UserRole.STAFF,
            )
        self.stdout.write('  Users: admin, clerk')
        return admin, clerk

    def create_customers(self):
        rows = [
            ('C-0001', 'Sok Dara', '012 345 678'),
            ('C-0002', 'Maria Novak', '+420 777 123 456'),
            ('C-0003', 'James Carter', '555-0142'),
        ]
        customers = [
            Customer.objects.get_or_create(code=code, defaults={'name': name, 'phone': phone})[0]
            for code, name, phone in rows
        ]
        self.stdout.write(f'  Customers: {len(customers)}')
        return customers

    def create_staff(self, clerk):
        rows = [
            ('S-001', 'Vannak', 'Cobbler', None),
            ('S-002', 'Lena', 'Front desk', clerk),
        ]
        staff = [
            StaffMember.objects.get_or_create(
                code=code,
                defaults={'name': name, 'position': position, 'user': user},
            )[0]
            for code, name, position, user in rows
        ]
        self.stdout.write(f'  Staff: {len(staff)}')
        return staff

    def create_services(self):
        rows = [
            ('Heel replacement', Decimal('12.00'), 30),
            ('Full resole', Decimal('35.00'), 120),
            ('Deep clean', Decimal('8.00'), 45),
            ('Color restoration', Decimal('20.00'), 90),
        ]
        services = [
            RepairService.objects.get_or_create(
                name=name,
                defaults={'default_price': price, 'default_duration_min': minutes},
            )[0]
            for name, price, minutes in rows
        ]
        self.stdout.write(f'  Repair services: {len(services)}')
        return services

    def create_items(self, admin):
        rows = [
            ('HEEL-RUB-01', 'Rubber heel tip', Decimal('1.20'), Decimal('3.00')),
            ('SOLE-VIB-01', 'Vibram sole sheet', Decimal('9.50'), Decimal('18.00')),
            ('GLUE-PU-01', 'PU contact glue', Decimal('4.00'), Decimal('0.00')),
            ('LACE-BLK-120', 'Black laces 120cm', Decimal('0.40'), Decimal('1.50')),
        ]
        items = []
        for sku, name, cost, price in rows:
            item, created = Item.objects.get_or_create(
                sku=sku,
                defaults={'name': name, 'cost': cost, 'price': price, 'reorder_level': 5},
            )
            if created:
                record_stock_movement(
                    item=item,
                    movement_type=StockMovementType.PURCHASE_IN,
                    qty=50,
                    unit_cost=cost,
                    note='Opening stock',
                    created_by=admin,
                )
            items.append(item)
        self.stdout.write(f'  Items: {len(items)}')
        return items
