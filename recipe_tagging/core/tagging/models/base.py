"""
Tagging app base data models
"""
from __future__ import annotations

import logging
from typing import List

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _

from recipe_tagging.lib.fields import case_sensitive_char_field, tag_name_field

from .utils import FULL_NAME_MAX_LENGTH, HIERARCHY_FIELDS, TAXONOMY_MAX_DEPTH, has_whitespace

log = logging.getLogger(__name__)


# Ancestry of a given tag; the per-level display names of a tag and its parents, starting from the root.
# Will contain 1...TAXONOMY_MAX_DEPTH + 1 elements.
Lineage = List[str]


class Taxonomy(models.Model):
    """
    The tag taxonomy of a single owner.

    Every TagRecord and MasterTagRow belongs to exactly one Taxonomy, which is
    how all queries are scoped by owner. The row also acts as the lock that
    serializes imports for its owner, and ``revision`` is bumped each time a
    new generation of the master list is applied.
    """

    id = models.BigAutoField(primary_key=True)
    owner = case_sensitive_char_field(
        max_length=255,
        unique=True,
        help_text=_("Identifier of the user that owns this taxonomy, as supplied by the session layer."),
    )
    revision = models.PositiveIntegerField(
        default=0,
        help_text=_("Incremented every time the taxonomy is replaced by an import."),
    )
    updated = models.DateTimeField(
        null=True,
        blank=True,
        default=None,
        help_text=_("When the taxonomy was last replaced."),
    )

    class Meta:
        verbose_name_plural = "Taxonomies"

    def __repr__(self):
        """
        Developer-facing representation of a Taxonomy.
        """
        return str(self)

    def __str__(self):
        """
        User-facing string representation of a Taxonomy.
        """
        return f"<{self.__class__.__name__}> ({self.id}) {self.owner} r{self.revision}"


class TagRecord(models.Model):
    """
    A single node of a taxonomy, at a specific level.

    The node's identity is its ``full_name``: the display names of all its
    ancestors followed by its own, concatenated. The per-level names are also
    stored in the ``l``, ``m``, ``s``, ``ss`` hierarchy-key columns so that
    children and ancestors can be looked up by exact equality instead of by
    string-prefix scans.

        level=2, disp_name="牛肉", full_name="素材別お肉牛肉", l="素材別", m="お肉", s="牛肉", ss=""

    Tag records are never edited; the importer replaces all of an owner's
    records at once.
    """

    id = models.BigAutoField(primary_key=True)
    taxonomy = models.ForeignKey(
        Taxonomy,
        on_delete=models.CASCADE,
        related_name="tag_records",
        help_text=_("Taxonomy (and therefore owner) this tag belongs to."),
    )
    seq_id = models.PositiveIntegerField(
        help_text=_("Sequential number of this tag within its taxonomy. Used as the display sort key."),
    )
    level = models.PositiveSmallIntegerField(
        help_text=_("Depth of this tag: 0 for the coarsest tags, up to 3 for the finest."),
    )
    disp_name = tag_name_field(
        help_text=_("Label shown for this tag alone, e.g. '牛肉'."),
    )
    full_name = case_sensitive_char_field(
        max_length=FULL_NAME_MAX_LENGTH,
        help_text=_("Identifier of this tag: the display names of its ancestors and itself, concatenated."),
    )
    l = tag_name_field(blank=True, default="")  # noqa: E741
    m = tag_name_field(blank=True, default="")
    s = tag_name_field(blank=True, default="")
    ss = tag_name_field(blank=True, default="")

    class Meta:
        indexes = [
            models.Index(fields=["taxonomy", "level", "l", "m", "s"], name="rt_tagrecord_level_keys_idx"),
        ]
        unique_together = [
            ["taxonomy", "full_name"],
            ["taxonomy", "seq_id"],
        ]
        ordering = ["seq_id"]

    def __repr__(self):
        """
        Developer-facing representation of a TagRecord.
        """
        return str(self)

    def __str__(self):
        """
        User-facing string representation of a TagRecord.
        """
        return f"<{self.__class__.__name__}> ({self.seq_id}) L{self.level} {self.full_name}"

    @property
    def hierarchy_keys(self) -> Lineage:
        """
        All four hierarchy-key values, including the empty ones.
        """
        return [getattr(self, field) for field in HIERARCHY_FIELDS]

    @property
    def lineage(self) -> Lineage:
        """
        The display names of this tag's ancestors and itself, root first.
        """
        return self.hierarchy_keys[:self.level + 1]

    @property
    def parent_full_name(self) -> str:
        """
        The full_name of this tag's parent, or "" for a root tag.
        """
        if not self.disp_name:
            return ""
        return self.full_name[:-len(self.disp_name)]

    def clean(self):
        """
        Validate the relation between level, hierarchy keys and names.
        """
        if self.level > TAXONOMY_MAX_DEPTH:
            raise ValidationError(f"Tag level cannot be deeper than {TAXONOMY_MAX_DEPTH}.")
        if not self.disp_name:
            raise ValidationError("Tag display name cannot be empty.")
        if has_whitespace(self.disp_name):
            raise ValidationError("Tag display name cannot contain whitespace.")

        keys = self.hierarchy_keys
        filled = [key for key in keys if key]
        if keys[:len(filled)] != filled:
            raise ValidationError("Tag hierarchy keys must be filled from the root level down, without gaps.")
        if len(filled) != self.level + 1:
            raise ValidationError("Tag level must match the number of hierarchy keys.")
        if filled[-1] != self.disp_name:
            raise ValidationError("Tag display name must match its deepest hierarchy key.")
        if "".join(filled) != self.full_name:
            raise ValidationError("Tag full name must be the concatenation of its hierarchy keys.")


class Generation(models.TextChoices):
    """
    The two generations of the master tag list that we keep.
    """
    CURRENT = "current", _("Current")
    PREVIOUS = "previous", _("Previous")


class MasterTagRow(models.Model):
    """
    One row of the externally edited master tag list, for one generation.

    The master list is what users edit; the TagRecords are derived from it.
    Each import demotes the "current" rows to "previous" (dropping the older
    previous rows) and stores the submitted list as the new "current".
    """

    id = models.BigAutoField(primary_key=True)
    taxonomy = models.ForeignKey(
        Taxonomy,
        on_delete=models.CASCADE,
        related_name="master_rows",
    )
    generation = models.CharField(
        max_length=10,
        choices=Generation.choices,
        help_text=_("Whether this row belongs to the current or the previous master list."),
    )
    seq_id = models.PositiveIntegerField(
        help_text=_("Position of the row within its generation, starting at 1."),
    )
    l = tag_name_field(blank=True, default="")  # noqa: E741
    m = tag_name_field(blank=True, default="")
    s = tag_name_field(blank=True, default="")
    ss = tag_name_field(blank=True, default="")

    class Meta:
        unique_together = [
            ["taxonomy", "generation", "seq_id"],
        ]
        ordering = ["generation", "seq_id"]

    def __str__(self):
        """
        User-facing string representation of a MasterTagRow.
        """
        return f"<{self.__class__.__name__}> {self.generation} #{self.seq_id}: {'/'.join(self.columns)}"

    @property
    def columns(self) -> Lineage:
        """
        The four column values, in order.
        """
        return [getattr(self, field) for field in HIERARCHY_FIELDS]
