"""Management command to repair folder paths that drifted."""

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import DatabaseError

from cloudnotes.apps.namespace.logic.reconcile import repair_paths

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Recompute folder paths from parent links and fix mismatches."""

    help = 'Repair folder paths that disagree with their parent links'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be repaired without writing',
        )
        parser.add_argument(
            '--owner',
            help='Only repair the namespace of this username',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the repair command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        dry_run = options['dry_run']
        owners = get_user_model().objects.filter(
            folders__isnull=False,
        ).distinct().order_by('pk')

        if options['owner']:
            owners = owners.filter(username=options['owner'])
            if not owners.exists():
                raise CommandError(
                    'No folders found for owner {0}'.format(options['owner']),
                )

        count = 0
        failed = 0

        for owner in owners:
            try:
                repairs = repair_paths(owner, dry_run=dry_run)
            except DatabaseError as exc:
                self.stderr.write(
                    f'Failed to repair paths of {owner.username}: {exc}',
                )
                logger.exception(
                    'Failed to repair paths for owner %s',
                    owner.pk,
                )
                failed += 1
                continue

            for repair in repairs:
                prefix = 'Would repair' if dry_run else 'Repaired'
                self.stdout.write(
                    f'{prefix}: {repair.stored_path} -> '
                    f'{repair.expected_path} '
                    f'(owner: {owner.username}, ID: {repair.folder_id})',
                )
            count += len(repairs)

        if dry_run:
            self.stdout.write(
                self.style.SUCCESS(f'Would repair {count} folder paths'),
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Repaired {count} folder paths, {failed} owners failed',
                ),
            )
