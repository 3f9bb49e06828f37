from django.core.management.base import BaseCommand
from billing.services import reconcile_unbilled_orders, unbilled_orders


class Command(BaseCommand):
    help = 'Generates bills for delivered orders that are missing one'

    def add_arguments(self, parser):
        parser.add_argument('--dry-run', action='store_true', help='Only list the unbilled orders')

    def handle(self, *args, **options):
        pending = list(unbilled_orders())
        if not pending:
            self.stdout.write(self.style.SUCCESS('Every delivered order has a bill.'))
            return

        self.stdout.write(f"Found {len(pending)} delivered orders without a bill.")
        if options['dry_run']:
            for order in pending:
                self.stdout.write(f"  {order.order_number} (distributor {order.distributor_id})")
            return

        outcome = reconcile_unbilled_orders()
        for result in outcome['results']:
            if not result['ok']:
                self.stdout.write(self.style.WARNING(f"  order {result['id']}: {result['error']}"))
        self.stdout.write(self.style.SUCCESS(f"Reconciliation finished: {outcome['message']}."))
