import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Currency",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("code", models.CharField(max_length=3, unique=True)),
                ("name", models.CharField(db_index=True, max_length=40)),
                ("symbol", models.CharField(max_length=10)),
            ],
            options={
                "verbose_name_plural": "currencies",
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="Provider",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "name",
                    models.CharField(
                        choices=[
                            ("open_er_api", "Open ExchangeRate API"),
                            ("currency_beacon", "CurrencyBeacon"),
                            ("mock", "Mock"),
                        ],
                        max_length=50,
                        unique=True,
                    ),
                ),
                (
                    "priority",
                    models.PositiveSmallIntegerField(
                        help_text="Lower number = higher priority. Determines the fallback order.",
                        unique=True,
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(
                        default=True,
                        help_text="Uncheck to exclude this provider from the fallback mechanism.",
                    ),
                ),
            ],
            options={
                "ordering": ["priority"],
            },
        ),
        migrations.CreateModel(
            name="CurrencyExchangeRate",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("valuation_date", models.DateField(db_index=True)),
                ("rate_value", models.DecimalField(db_index=True, decimal_places=6, max_digits=18)),
                (
                    "exchanged_currency",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="exchanged_exchanges",
                        to="exchange.currency",
                    ),
                ),
                (
                    "source_currency",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="source_exchanges",
                        to="exchange.currency",
                    ),
                ),
            ],
            options={
                "ordering": ["-valuation_date"],
            },
        ),
        migrations.AddConstraint(
            model_name="currencyexchangerate",
            constraint=models.UniqueConstraint(
                fields=("source_currency", "exchanged_currency", "valuation_date"),
                name="unique_rate_per_day",
            ),
        ),
    ]
