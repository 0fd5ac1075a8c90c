"""
tagging Django application initialization.
"""

from django.apps import AppConfig


class TaggingConfig(AppConfig):
    """
    Configuration for the recipe tagging Django application.
    """

    name = "recipe_tagging.core.tagging"
    verbose_name = "Recipe Tagging"
    default_auto_field = "django.db.models.BigAutoField"
    label = "rt_tagging"
