from django.core.management.base import BaseCommand, CommandError

from apps.exchange.application.tasks import refresh_exchange_rates


class Command(BaseCommand):
    help = 'Refresh the exchange rate table of every catalog currency'

    def add_arguments(self, parser):
        parser.add_argument(
            '--sync',
            action='store_true',
            help='Execute synchronously instead of using Celery task queue'
        )

    def handle(self, **options):
        if options['sync']:
            self.stdout.write('Running in synchronous mode...')
            result = refresh_exchange_rates()

            if result['success']:
                self.stdout.write(
                    self.style.SUCCESS(
                        f"Refreshed rates for: {', '.join(result['bases_refreshed'])}"
                    )
                )
                if result.get('errors'):
                    self.stdout.write(
                        self.style.WARNING(
                            f"Errors: {len(result['errors'])}"
                        )
                    )
            else:
                message = result.get('message') or '; '.join(result.get('errors', [])) or 'Unknown error'
                raise CommandError(f"Failed: {message}")
        else:
            self.stdout.write('Dispatching Celery task...')
            task = refresh_exchange_rates.delay()

            self.stdout.write(
                self.style.SUCCESS(
                    f'Task dispatched with ID: {task.id}'
                )
            )
            self.stdout.write(
                'Use "celery -A core inspect active" to check task status'
            )
