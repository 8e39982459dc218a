import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Fund',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('fund_code', models.CharField(editable=False, max_length=20, unique=True)),
                ('category', models.CharField(choices=[('general', 'General'), ('maintenance', 'Maintenance'), ('festival', 'Festival'), ('anadhanam', 'Anadhanam'), ('construction', 'Construction'), ('emergency', 'Emergency')], default='general', max_length=20)),
                ('cash_balance', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('upi_balance', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('total_balance', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('is_active', models.BooleanField(default=True)),
                ('description', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='funds_created', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'funds',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['category', 'is_active'], name='funds_category_active_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('is_active', True)), fields=('category',), name='funds_one_active_per_category'),
                    models.CheckConstraint(condition=models.Q(('cash_balance__gte', 0)), name='funds_cash_non_negative'),
                    models.CheckConstraint(condition=models.Q(('upi_balance__gte', 0)), name='funds_upi_non_negative'),
                    models.CheckConstraint(condition=models.Q(('total_balance__gte', 0)), name='funds_total_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='FundTransaction',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('sequence', models.PositiveIntegerField()),
                ('type', models.CharField(choices=[('credit', 'Credit'), ('debit', 'Debit')], max_length=10)),
                ('source', models.CharField(choices=[('donation', 'Donation'), ('expense', 'Expense'), ('transfer', 'Transfer'), ('adjustment', 'Adjustment')], max_length=20)),
                ('source_id', models.UUIDField(blank=True, null=True)),
                ('method', models.CharField(choices=[('cash', 'Cash'), ('upi', 'UPI')], max_length=10)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[MinValueValidator(Decimal('0.01'))])),
                ('cash_after', models.DecimalField(decimal_places=2, max_digits=12)),
                ('upi_after', models.DecimalField(decimal_places=2, max_digits=12)),
                ('total_after', models.DecimalField(decimal_places=2, max_digits=12)),
                ('description', models.TextField(blank=True)),
                ('date', models.DateTimeField(default=django.utils.timezone.now)),
                ('fund', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transactions', to='funds.fund')),
                ('performed_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='fund_transactions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'fund_transactions',
                'ordering': ['fund', 'sequence'],
                'indexes': [
                    models.Index(fields=['fund', 'date'], name='fund_tx_fund_date_idx'),
                    models.Index(fields=['source', 'source_id'], name='fund_tx_source_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('fund', 'sequence'), name='fund_transactions_unique_sequence'),
                    models.CheckConstraint(condition=models.Q(('amount__gt', 0)), name='fund_transactions_amount_positive'),
                ],
            },
        ),
    ]
