"""
List orders that have no detail rows.

These are left behind when a detail insert fails and the compensating
delete of the order fails as well.
"""
import logging

from django.core.management.base import BaseCommand
from django.db.models import Count

from stockroom.orders.models import Order

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Find orders without detail rows (optionally delete them)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--delete',
            action='store_true',
            help='Delete the orphan orders that were found',
        )

    def handle(self, *args, **options):
        orphans = (
            Order.objects.annotate(detail_count=Count('details'))
            .filter(detail_count=0)
            .order_by('id')
        )
        orphan_ids = list(orphans.values_list('id', flat=True))

        if not orphan_ids:
            self.stdout.write(self.style.SUCCESS("No orphan orders found"))
            return

        self.stdout.write(self.style.WARNING(f"Found {len(orphan_ids)} order(s) without details:"))
        for order in Order.objects.filter(id__in=orphan_ids).order_by('id'):
            self.stdout.write(
                f"  Order #{order.id}: item_count={order.item_count}, "
                f"total_incl_tax={order.total_incl_tax}, order_date={order.order_date.isoformat()}"
            )

        if options['delete']:
            deleted, _ = Order.objects.filter(id__in=orphan_ids).delete()
            logger.warning(f"Deleted orphan orders: {orphan_ids}")
            self.stdout.write(self.style.SUCCESS(f"Deleted {deleted} orphan order(s)"))
