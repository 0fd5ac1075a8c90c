"""
Django management command to print the master tag list of a taxonomy
"""
from django.core.management.base import BaseCommand

from recipe_tagging.core.tagging.import_export.api import load_generation


class Command(BaseCommand):
    """
    Django management command to export a master tag list, in the import format.
    """
    help = 'Print the current (or previous) master tag list of an owner.'

    def add_arguments(self, parser):
        parser.add_argument('owner', type=str, help='The owner of the taxonomy (their username).')
        parser.add_argument(
            '--previous',
            action='store_true',
            help='Print the previous generation instead of the current one.',
        )

    def handle(self, *args, **options):
        self.stdout.write(load_generation(options['owner'], previous=options['previous']))
