import uuid
from decimal import Decimal
from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('funds', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Expense',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('expense_code', models.CharField(editable=False, max_length=20, unique=True)),
                ('category', models.CharField(choices=[('cooking-gas-fuel', 'Cooking gas / fuel'), ('labor-charges', 'Labor charges'), ('electricity-bill', 'Electricity bill'), ('maintenance', 'Maintenance'), ('other-temple-expenses', 'Other temple expenses'), ('water-bill', 'Water bill'), ('festival-expenses', 'Festival expenses'), ('anadhanam-supplies', 'Anadhanam supplies'), ('cleaning-supplies', 'Cleaning supplies'), ('other', 'Other')], max_length=30)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('description', models.TextField()),
                ('vendor_name', models.CharField(max_length=200)),
                ('invoice_number', models.CharField(blank=True, max_length=100)),
                ('bill_date', models.DateField()),
                ('payment_method', models.CharField(choices=[('cash', 'Cash'), ('upi', 'UPI'), ('bank-transfer', 'Bank transfer'), ('cheque', 'Cheque')], max_length=20)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('paid', 'Paid'), ('approved', 'Approved'), ('rejected', 'Rejected')], default='pending', max_length=20)),
                ('allocated_fund_category', models.CharField(blank=True, max_length=20)),
                ('allocated_payment_method', models.CharField(blank=True, max_length=10)),
                ('allocated_at', models.DateTimeField(blank=True, null=True)),
                ('remarks', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('allocated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='expenses_allocated', to=settings.AUTH_USER_MODEL)),
                ('allocated_fund', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='allocated_expenses', to='funds.fund')),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='expenses_created', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'expenses',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'created_at'], name='expenses_status_created_idx'),
                    models.Index(fields=['allocated_payment_method'], name='expenses_alloc_method_idx'),
                ],
            },
        ),
    ]
