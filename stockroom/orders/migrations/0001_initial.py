from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_count', models.IntegerField(default=0)),
                ('total_excl_tax', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=18)),
                ('total_incl_tax', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=18)),
                ('order_date', models.DateTimeField()),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'orders',
                'ordering': ['-order_date', '-id'],
            },
        ),
        migrations.CreateModel(
            name='OrderDetail',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product_id', models.BigIntegerField(db_index=True)),
                ('quantity', models.IntegerField()),
                ('unit_price_excl_tax', models.DecimalField(decimal_places=2, max_digits=12)),
                ('unit_price_incl_tax', models.DecimalField(decimal_places=2, max_digits=12)),
                ('subtotal_excl_tax', models.DecimalField(decimal_places=2, max_digits=18)),
                ('subtotal_incl_tax', models.DecimalField(decimal_places=2, max_digits=18)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='details', to='orders.order')),
            ],
            options={
                'db_table': 'order_details',
                'ordering': ['id'],
                'indexes': [
                    models.Index(fields=['order', 'product_id'], name='idx_detail_order_product'),
                ],
            },
        ),
    ]
