"""
Create demo products with stock rows for local development
"""
from decimal import Decimal, ROUND_HALF_UP

from django.core.management.base import BaseCommand
from django.db import transaction

from stockroom.catalog.models import Product
from stockroom.inventory.models import Stock

SIZES = ['S', 'M', 'L', 'XL']
TAX_RATE = Decimal('1.10')


class Command(BaseCommand):
    help = 'Create demo products with opening stock'

    def add_arguments(self, parser):
        parser.add_argument(
            '--products',
            type=int,
            default=8,
            help='Number of products to create (default: 8)',
        )
        parser.add_argument(
            '--stock',
            type=int,
            default=20,
            help='Opening stock per product (default: 20)',
        )

    def handle(self, *args, **options):
        count = options['products']
        opening_stock = options['stock']
        created = 0

        with transaction.atomic():
            for index in range(count):
                size = SIZES[index % len(SIZES)]
                code = f"DEMO-{index // len(SIZES) + 1:03d}"
                # 13-digit JAN codes in the 49 (Japan) prefix range
                jan_code = f"49{index + 1:011d}"
                price_excl = Decimal(1000 + 500 * (index // len(SIZES)))
                price_incl = (price_excl * TAX_RATE).quantize(Decimal('1'), rounding=ROUND_HALF_UP)

                product, was_created = Product.objects.get_or_create(
                    jan_code=jan_code,
                    defaults={
                        'name': f"Demo Tee {code}",
                        'size': size,
                        'product_code': code,
                        'price_excl_tax': price_excl,
                        'price_incl_tax': price_incl,
                    },
                )
                Stock.objects.get_or_create(product=product, defaults={'quantity': opening_stock})
                if was_created:
                    created += 1
                    self.stdout.write(f"  Created {product}")

        self.stdout.write(self.style.SUCCESS(f"Created {created} product(s), {count - created} already present"))
