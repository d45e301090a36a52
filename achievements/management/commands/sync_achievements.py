"""
Django management command to sync the achievement catalog into the database.

Safe to run repeatedly: rows are matched on achievement_id and updated in
place. With --evaluate, every user is re-checked afterwards so badges whose
conditions are already met are unlocked.

Usage:
    python manage.py sync_achievements
    python manage.py sync_achievements --evaluate
"""
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from achievements.catalog import ACHIEVEMENTS
from achievements.services.evaluator import evaluate_achievements_safely, sync_catalog


class Command(BaseCommand):
    help = 'Upsert the achievement catalog and optionally re-evaluate all users'

    def add_arguments(self, parser):
        parser.add_argument(
            '--evaluate',
            action='store_true',
            help='Evaluate achievements for every user after syncing'
        )

    def handle(self, *_args, **options):
        self.stdout.write(self.style.SUCCESS('=' * 60))
        self.stdout.write(self.style.SUCCESS('  SYNC ACHIEVEMENTS'))
        self.stdout.write(self.style.SUCCESS('=' * 60))
        self.stdout.write(f'Catalog entries: {len(ACHIEVEMENTS)}\n')

        created, updated = sync_catalog()
        self.stdout.write(self.style.SUCCESS(f'✓ Created: {created}'))
        self.stdout.write(self.style.SUCCESS(f'✓ Updated: {updated}'))

        if options.get('evaluate'):
            unlocked = 0
            for user in get_user_model().objects.all():
                new = evaluate_achievements_safely(user)
                if new:
                    self.stdout.write(f'  {user.username}: {", ".join(a.name for a in new)}')
                unlocked += len(new)
            self.stdout.write(self.style.SUCCESS(f'✓ Unlocked: {unlocked}'))

        self.stdout.write('=' * 60)
