import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

PAYMENT_METHOD_CHOICES = [
    ("credit_card", "Credit Card"),
    ("paypal", "Paypal"),
    ("card", "Card"),
    ("cash", "Cash"),
    ("paylater", "Paylater"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Attraction",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("location", models.CharField(blank=True, max_length=255)),
                ("duration", models.PositiveIntegerField(default=60)),
                ("duration_unit", models.CharField(default="minutes", max_length=20)),
                ("max_capacity", models.PositiveIntegerField(default=1)),
                ("price", models.DecimalField(decimal_places=2, max_digits=10)),
                (
                    "pricing_mode",
                    models.CharField(
                        choices=[("per_unit", "Per Unit"), ("fixed", "Fixed"), ("group", "Group")],
                        default="per_unit",
                        max_length=20,
                    ),
                ),
                ("availability", models.JSONField(blank=True, default=dict)),
                ("time_slots", models.JSONField(blank=True, default=list)),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("inactive", "Inactive")],
                        default="active",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="GiftInstrument",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("code", models.CharField(max_length=32, unique=True)),
                (
                    "type",
                    models.CharField(
                        choices=[("fixed", "Fixed"), ("percentage", "Percentage")],
                        max_length=20,
                    ),
                ),
                ("initial_value", models.DecimalField(decimal_places=2, max_digits=10)),
                ("balance", models.DecimalField(decimal_places=2, max_digits=10)),
                ("max_usage", models.PositiveIntegerField(default=1)),
                ("description", models.TextField(blank=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("active", "Active"),
                            ("inactive", "Inactive"),
                            ("expired", "Expired"),
                            ("redeemed", "Redeemed"),
                            ("cancelled", "Cancelled"),
                            ("deleted", "Deleted"),
                        ],
                        default="active",
                        max_length=20,
                    ),
                ),
                ("expiry_date", models.DateTimeField(blank=True, null=True)),
                ("created_by", models.CharField(max_length=64)),
                ("deleted", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["status"], name="gift_instrument_status_idx")],
            },
        ),
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("attraction_name", models.CharField(max_length=255)),
                ("customer_name", models.CharField(max_length=255)),
                ("customer_email", models.EmailField(max_length=255)),
                ("customer_phone", models.CharField(blank=True, max_length=50)),
                ("reserved_date", models.DateField()),
                ("reserved_time", models.TimeField()),
                ("participants", models.PositiveIntegerField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("confirmed", "Confirmed"),
                            ("cancelled", "Cancelled"),
                            ("completed", "Completed"),
                        ],
                        default="confirmed",
                        max_length=20,
                    ),
                ),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("payment_method", models.CharField(choices=PAYMENT_METHOD_CHOICES, max_length=20)),
                ("duration_label", models.CharField(blank=True, max_length=50)),
                ("idempotency_key", models.CharField(max_length=64, unique=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "attraction",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to="reservations.attraction",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["attraction", "reserved_date"], name="booking_attraction_date_idx")
                ],
            },
        ),
        migrations.CreateModel(
            name="Purchase",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("attraction_name", models.CharField(max_length=255)),
                ("customer_name", models.CharField(max_length=255)),
                ("customer_email", models.CharField(blank=True, max_length=255)),
                ("customer_phone", models.CharField(blank=True, max_length=50)),
                ("quantity", models.PositiveIntegerField()),
                (
                    "status",
                    models.CharField(
                        choices=[("confirmed", "Confirmed")],
                        default="confirmed",
                        max_length=20,
                    ),
                ),
                ("subtotal", models.DecimalField(decimal_places=2, max_digits=10)),
                ("discount", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("payment_method", models.CharField(choices=PAYMENT_METHOD_CHOICES, max_length=20)),
                ("notes", models.TextField(blank=True)),
                ("idempotency_key", models.CharField(max_length=64, unique=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "attraction",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchases",
                        to="reservations.attraction",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
