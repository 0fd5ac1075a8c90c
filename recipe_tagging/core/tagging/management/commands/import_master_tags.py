"""
Django management command to replace a taxonomy from a master tag list file
"""
import logging
import time

from django.core.management import CommandError
from django.core.management.base import BaseCommand

from recipe_tagging.core.tagging.import_export.api import import_taxonomy

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """
    Django management command to import a tab-separated master tag list.
    """
    help = 'Replace the taxonomy of an owner with a tab-separated master tag list.'

    def add_arguments(self, parser):
        parser.add_argument('owner', type=str, help='The owner of the taxonomy (their username).')
        parser.add_argument('file_name', type=str, help='The path of the master tag list to import.')

    def handle(self, *args, **options):
        owner = options['owner']
        file_name = options['file_name']
        try:
            with open(file_name, encoding="utf-8") as master_file:
                text = master_file.read()
        except FileNotFoundError as exc:
            message = f"Master tag list {file_name} not found: {exc}"
            raise CommandError(message) from exc

        start_time = time.time()
        result = import_taxonomy(owner, text)
        duration = time.time() - start_time
        if not result.success:
            logger.error("Import of %s for %s failed:\n%s", file_name, owner, result.task.log)
            raise CommandError(f"Failed to import '{file_name}': {result.message}")
        message = f'{file_name} imported for {owner}: {result.message} (duration: {duration:.2f} seconds)'
        self.stdout.write(self.style.SUCCESS(message))
