"""
Recipe bookmarks, the items that tags are applied to.

Bookmarks are created and edited elsewhere (by the bookmarking UI and the
scraper); the tagging engine only reads them to count and filter by tag.
"""
from __future__ import annotations

from django.db import models
from django.utils.translation import gettext_lazy as _

from recipe_tagging.lib.fields import case_sensitive_char_field, case_sensitive_text_field

from .utils import join_tags, matches_tag, split_tags


class RecipeBookmark(models.Model):
    """
    A recipe that a user has saved, with the tags applied to it.

    ``tags`` is the tag-membership string: the full names of every tag applied
    to this recipe, separated by single spaces.
    """

    id = models.BigAutoField(primary_key=True)
    owner = case_sensitive_char_field(
        max_length=255,
        db_index=True,
        help_text=_("Identifier of the user that saved this recipe."),
    )
    recipe_id = models.PositiveBigIntegerField(
        help_text=_("External recipe number."),
    )
    title = models.CharField(max_length=500, blank=True, default="")
    image = models.URLField(max_length=1000, blank=True, default="")
    rank_score = models.IntegerField(
        default=0,
        help_text=_("Popularity of the recipe. The most popular tagged recipe provides a tag's image."),
    )
    tags = case_sensitive_text_field(
        blank=True,
        default="",
        help_text=_("Full names of the tags applied to this recipe, separated by spaces."),
    )

    class Meta:
        unique_together = [
            ["owner", "recipe_id"],
        ]

    def __str__(self):
        """
        User-facing string representation of a RecipeBookmark.
        """
        return f"<{self.__class__.__name__}> ({self.recipe_id}) {self.title}"

    def save(self, *args, **kwargs):
        """
        Normalize the tag-membership string before saving.
        """
        self.tags = join_tags(split_tags(self.tags))
        super().save(*args, **kwargs)

    @property
    def tag_names(self) -> list[str]:
        """
        The full names of the tags applied to this recipe.
        """
        return split_tags(self.tags)

    def has_tag(self, full_name: str) -> bool:
        return matches_tag(self.tags, full_name)
