import uuid
from decimal import Decimal
from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Donation',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('donation_code', models.CharField(editable=False, max_length=20, unique=True)),
                ('donor_name', models.CharField(max_length=200)),
                ('donor_mobile', models.CharField(max_length=10, validators=[django.core.validators.RegexValidator('^[6-9]\\d{9}$', 'Please provide a valid 10-digit mobile number')])),
                ('donor_email', models.EmailField(blank=True, max_length=254)),
                ('donor_address', models.TextField(blank=True)),
                ('type', models.CharField(choices=[('cash', 'Cash'), ('upi', 'UPI'), ('in-kind', 'In-kind')], max_length=10)),
                ('amount', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('upi_transaction_id', models.CharField(blank=True, max_length=100)),
                ('event', models.CharField(choices=[('new-moon', 'New moon'), ('full-moon', 'Full moon'), ('guru-poojai', 'Guru poojai'), ('uthira-nakshatram', 'Uthira nakshatram'), ('adi-ammavasai', 'Adi ammavasai'), ('anadhanam', 'Anadhanam'), ('pradosham', 'Pradosham'), ('shivaratri', 'Shivaratri'), ('other', 'Other'), ('general', 'General')], default='general', max_length=30)),
                ('remarks', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('received', 'Received'), ('processed', 'Processed'), ('used', 'Used')], default='received', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('received_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='donations_received', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'donations',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['type', 'created_at'], name='donations_type_created_idx'),
                    models.Index(fields=['status'], name='donations_status_idx'),
                ],
            },
        ),
    ]
