"""
Management command to suspend customers whose subscription expired.
Intended for hosts that trigger the scan from system cron instead of django-q.
"""

from typing import Any

from django.core.management.base import BaseCommand

from apps.billing.expiration_service import ExpirationScanner
from apps.billing.tasks import schedule_expiration_scan


class Command(BaseCommand):
    help = 'Suspend active customers whose subscription has expired'

    def add_arguments(self, parser: Any) -> None:
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List the customers that would be suspended without contacting the panel',
        )
        parser.add_argument(
            '--schedule',
            action='store_true',
            help='Register the daily django-q schedule instead of scanning now',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        if options['schedule']:
            status = schedule_expiration_scan()
            self.stdout.write(self.style.SUCCESS(f'Expiration scan schedule: {status}'))
            return

        report = ExpirationScanner().scan(dry_run=options['dry_run'])

        if report.processed == 0:
            self.stdout.write('No expired customers found')
            return

        prefix = '[DRY RUN] Would suspend' if report.dry_run else 'Suspended'
        for email in report.suspended:
            self.stdout.write(f'  {prefix}: {email}')
        for failure in report.failed:
            self.stdout.write(self.style.ERROR(f"  Failed: {failure['email']} ({failure['error']})"))

        summary = (
            f'Processed {report.processed} expired customers: '
            f'{len(report.suspended)} suspended, {len(report.failed)} failed'
        )
        if report.failed:
            self.stdout.write(self.style.WARNING(summary))
        else:
            self.stdout.write(self.style.SUCCESS(summary))
