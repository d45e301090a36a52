"""
Django management command to close forgotten timers.

Open timers older than the stale threshold are closed with their duration
capped (see settings.policy). With --all-open every open timer is stopped
regardless of age, e.g. before removing an account.

Usage:
    python manage.py close_stale_timers
    python manage.py close_stale_timers --user=alice
    python manage.py close_stale_timers --user=alice --all-open
"""
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from settings.policy import get_timer_policy
from time_entries.models import TimeEntry
from time_entries.services.timer import TimerService


class Command(BaseCommand):
    help = 'Close stale (forgotten) timers for one or all users'

    def add_arguments(self, parser):
        parser.add_argument(
            '--user',
            type=str,
            help='Only process the user with this username'
        )
        parser.add_argument(
            '--all-open',
            action='store_true',
            help='Stop every open timer, not just stale ones'
        )

    def handle(self, *_args, **options):
        username = options.get('user')
        all_open = options.get('all_open', False)
        User = get_user_model()

        if username:
            try:
                users = [User.objects.get(username=username)]
            except User.DoesNotExist:
                raise CommandError(f'No user found with username: {username}')
        else:
            user_ids = TimeEntry.objects.open().values_list('user_id', flat=True).distinct()
            users = list(User.objects.filter(pk__in=user_ids))

        policy = get_timer_policy()

        self.stdout.write(self.style.SUCCESS('=' * 60))
        self.stdout.write(self.style.SUCCESS('  CLOSE STALE TIMERS'))
        self.stdout.write(self.style.SUCCESS('=' * 60))
        if all_open:
            self.stdout.write('Mode: stop every open timer')
        else:
            self.stdout.write(
                f'Threshold: {policy.stale_threshold_hours:g}h, '
                f'cap: {policy.stale_duration_cap_seconds}s'
            )
        self.stdout.write(f'Users with open timers: {len(users)}\n')

        total_closed = 0
        error_count = 0
        for user in users:
            service = TimerService(user, policy=policy)
            try:
                if all_open:
                    closed = len(service.force_close_all())
                else:
                    closed = service.reconcile_stale_sessions()
            except Exception as e:
                self.stdout.write(self.style.ERROR(f'✗ {user.username}: {str(e)}'))
                error_count += 1
                continue

            if closed:
                self.stdout.write(self.style.SUCCESS(f'✓ {user.username}: closed {closed}'))
            total_closed += closed

        self.stdout.write('\n' + '=' * 60)
        self.stdout.write(self.style.SUCCESS(f'✓ Closed: {total_closed}'))
        if error_count:
            self.stdout.write(self.style.ERROR(f'✗ Errors: {error_count}'))
        self.stdout.write('=' * 60)
