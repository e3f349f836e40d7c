from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("exchange", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="currencyexchangerate",
            name="rate_value",
            field=models.DecimalField(db_index=True, decimal_places=15, max_digits=30),
        ),
    ]
