import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


STATUS_CHOICES = [
    ('RECEIVED', 'Received'),
    ('CLEANING', 'Cleaning'),
    ('REPAIRING', 'Repairing'),
    ('READY', 'Ready'),
    ('DELIVERED', 'Delivered'),
    ('CANCELLED', 'Cancelled'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('customers', '0001_initial'),
        ('staff', '0001_initial'),
        ('catalog', '0001_initial'),
        ('inventory', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='ServiceOrder',
            fields=[
                ('deleted_at', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('code', models.CharField(max_length=40, unique=True)),
                ('vet_code', models.CharField(blank=True, max_length=64, null=True)),
                ('shoe_brand', models.CharField(blank=True, max_length=100)),
                ('shoe_color', models.CharField(blank=True, max_length=50)),
                ('shoe_size', models.CharField(blank=True, max_length=20)),
                ('shoe_type', models.CharField(blank=True, max_length=50)),
                ('pair_count', models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1), MaxValueValidator(10)])),
                ('urgent', models.BooleanField(default=False)),
                ('before_photo_url', models.URLField(blank=True, max_length=500, null=True)),
                ('after_photo_url', models.URLField(blank=True, max_length=500, null=True)),
                ('problem_desc', models.TextField(blank=True)),
                ('received_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('promised_at', models.DateTimeField(blank=True, null=True)),
                ('status', models.CharField(choices=STATUS_CHOICES, default='RECEIVED', max_length=20)),
                ('payment_status', models.CharField(choices=[('UNPAID', 'Unpaid'), ('PARTIAL', 'Partially paid'), ('PAID', 'Paid')], default='UNPAID', max_length=10)),
                ('sub_total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('discount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('assigned_staff', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assigned_orders', to='staff.staffmember')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_service_orders', to=settings.AUTH_USER_MODEL)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='service_orders', to='customers.customer')),
            ],
            options={
                'db_table': 'service_orders',
                'ordering': ['-received_at'],
                'abstract': False,
                'indexes': [
                    models.Index(fields=['status'], name='service_ord_status_8a41c2_idx'),
                    models.Index(fields=['customer', '-received_at'], name='service_ord_custome_f03b7d_idx'),
                    models.Index(fields=['-received_at'], name='service_ord_receive_2c9e55_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ServiceLine',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('description', models.CharField(max_length=255)),
                ('qty', models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])),
                ('price', models.DecimalField(decimal_places=2, max_digits=12)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('repair_service', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='service_lines', to='catalog.repairservice')),
                ('service_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='repairs.serviceorder')),
            ],
            options={
                'db_table': 'service_lines',
                'ordering': ['created_at'],
            },
        ),
        migrations.CreateModel(
            name='ServicePart',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('qty', models.PositiveIntegerField(validators=[MinValueValidator(1)])),
                ('unit_price', models.DecimalField(decimal_places=2, max_digits=12)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='service_parts', to='inventory.item')),
                ('service_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='parts', to='repairs.serviceorder')),
            ],
            options={
                'db_table': 'service_parts',
                'ordering': ['created_at'],
            },
        ),
        migrations.CreateModel(
            name='ServiceStatusHistory',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('status', models.CharField(choices=STATUS_CHOICES, max_length=20)),
                ('note', models.CharField(blank=True, max_length=255, null=True)),
                ('changed_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('changed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='service_status_changes', to=settings.AUTH_USER_MODEL)),
                ('service_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='status_history', to='repairs.serviceorder')),
            ],
            options={
                'db_table': 'service_status_history',
                'ordering': ['changed_at'],
                'verbose_name_plural': 'service status history',
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('method', models.CharField(choices=[('CASH', 'Cash'), ('CARD', 'Card'), ('TRANSFER', 'Bank transfer'), ('OTHER', 'Other')], default='CASH', max_length=10)),
                ('paid_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('note', models.CharField(blank=True, max_length=255, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('received_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='received_payments', to=settings.AUTH_USER_MODEL)),
                ('service_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='repairs.serviceorder')),
            ],
            options={
                'db_table': 'payments',
                'ordering': ['-paid_at'],
                'abstract': False,
                'indexes': [
                    models.Index(fields=['service_order', '-paid_at'], name='payments_service_a7e3b9_idx'),
                ],
            },
        ),
    ]
