"""
Management command to credit refunds left owed by failed rejections.

A rejection whose balance credit failed (no matching account, database
outage) keeps ``refund_state = owed``. Run this once the cause is fixed.

Usage:
    python manage.py sweep_refunds
    python manage.py sweep_refunds --dry-run
"""

from django.core.management.base import BaseCommand
from apps.purchases.models import RewardPurchase, RefundState
from apps.purchases.services import sweep_owed_refunds


class Command(BaseCommand):
    help = 'Credit owed refunds of rejected purchases'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List owed refunds without crediting anything',
        )

    def handle(self, *args, **options):
        owed = RewardPurchase.objects.filter(refund_state=RefundState.OWED).order_by('created_at')
        count = owed.count()

        if count == 0:
            self.stdout.write(self.style.SUCCESS('No owed refunds.'))
            return

        self.stdout.write(f'\nFound {count} owed refund(s):\n')
        for purchase in owed:
            self.stdout.write(
                f'  - {purchase.id} | {purchase.username} ({purchase.user_id}) | '
                f'{purchase.reward_name} | {purchase.price} pts'
            )

        if options['dry_run']:
            self.stdout.write(self.style.WARNING('\n--dry-run mode: No changes made.'))
            return

        result = sweep_owed_refunds()

        self.stdout.write(
            self.style.SUCCESS(f"\nCredited {len(result['settled'])} refund(s).")
        )
        if result['failed']:
            self.stdout.write(
                self.style.ERROR(f"{len(result['failed'])} refund(s) still owed:")
            )
            for purchase_id in result['failed']:
                self.stdout.write(f'  - {purchase_id}')
