from decimal import Decimal

from django.db import migrations, models

import stockroom.catalog.validators


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(db_index=True, max_length=100)),
                ('size', models.CharField(blank=True, max_length=20)),
                ('product_code', models.CharField(db_index=True, max_length=50)),
                ('jan_code', models.CharField(max_length=13, unique=True, validators=[stockroom.catalog.validators.validate_jan_code])),
                ('image_url', models.URLField(blank=True)),
                ('price_excl_tax', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[stockroom.catalog.validators.validate_price])),
                ('price_incl_tax', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[stockroom.catalog.validators.validate_price])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'products',
                'ordering': ['product_code', 'size'],
            },
        ),
    ]
