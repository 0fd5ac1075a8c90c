"""
Classes and functions to plan and execute the replacement of a taxonomy.
"""
from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, Sequence

from attrs import define, field
from django.db import transaction
from django.db.models import F
from django.utils import timezone
from django.utils.translation import gettext as _

from ..conf import get_setting
from ..models import Generation, MasterTagRow, TagImportTask, TagRecord, Taxonomy
from ..models.utils import HIERARCHY_FIELDS
from .exceptions import EmptyTaxonomyError

log = logging.getLogger(__name__)


@define
class MasterRowItem:
    """
    One row of a master tag list, on the import plan

    ``columns`` always holds four values, the empty ones as "".
    """

    columns: tuple[str, str, str, str]
    row: int | None = None

    @classmethod
    def from_cells(cls, cells: Sequence[str], row: int | None = None) -> MasterRowItem:
        padded = (list(cells) + [""] * len(HIERARCHY_FIELDS))[:len(HIERARCHY_FIELDS)]
        return cls(columns=tuple(padded), row=row)  # type: ignore[arg-type]

    @classmethod
    def from_model(cls, master_row: MasterTagRow) -> MasterRowItem:
        return cls.from_cells(master_row.columns, row=master_row.seq_id)

    @property
    def lineage(self) -> list[str]:
        """
        The non-empty columns, from the root level down.
        """
        return [column for column in self.columns if column]

    @property
    def level(self) -> int:
        return len(self.lineage) - 1

    @property
    def disp_name(self) -> str:
        return self.lineage[-1]

    @property
    def full_name(self) -> str:
        return "".join(self.lineage)

    def __str__(self):
        """
        User-facing string representation of a master tag row.
        """
        return f"<{self.__class__.__name__}> ({self.row}) {'/'.join(self.lineage)}"


@define
class TagRecordItem:
    """
    A tag record derived from the master tag list, not yet saved
    """

    seq_id: int
    level: int
    disp_name: str
    full_name: str
    keys: list[str] = field(factory=list)

    def to_model(self, taxonomy: Taxonomy) -> TagRecord:
        keys = dict(zip(HIERARCHY_FIELDS, self.keys))
        return TagRecord(
            taxonomy=taxonomy,
            seq_id=self.seq_id,
            level=self.level,
            disp_name=self.disp_name,
            full_name=self.full_name,
            **keys,
        )


def derive_tag_records(rows: Iterable[MasterRowItem]) -> list[TagRecordItem]:
    """
    Derive the tag records of a taxonomy from its master tag rows.

    Every row yields a tag for each of its levels, so a row can introduce its
    parents implicitly:

        素材別  お肉  牛肉    ->  素材別 (0), 素材別お肉 (1), 素材別お肉牛肉 (2)

    Tags that were already introduced by a previous row are not repeated.
    Sequence ids are assigned in first-seen order, starting at 1.
    """
    records: list[TagRecordItem] = []
    seen: set[str] = set()
    for row in rows:
        path: list[str] = []
        for column in row.columns:
            if not column:
                break
            path.append(column)
            full_name = "".join(path)
            if full_name in seen:
                continue
            seen.add(full_name)
            records.append(TagRecordItem(
                seq_id=len(records) + 1,
                level=len(path) - 1,
                disp_name=column,
                full_name=full_name,
                keys=list(path),
            ))
    return records


def replace_tag_records(taxonomy: Taxonomy, records: Sequence[TagRecordItem]):
    """
    Deletes all the tag records of `taxonomy` and inserts `records` instead.

    Must be called within a transaction, or readers may see a partial taxonomy.
    """
    batch_size = get_setting("BULK_BATCH_SIZE")
    TagRecord.objects.filter(taxonomy=taxonomy).delete()
    TagRecord.objects.bulk_create(
        [record.to_model(taxonomy) for record in records],
        batch_size=batch_size,
    )



def lock_taxonomy(taxonomy: Taxonomy) -> Taxonomy:
    """
    Locks the row of `taxonomy` until the end of the current transaction and
    returns a fresh copy of it.

    The lock is a no-op write rather than select_for_update(), so that on SQLite
    the transaction waits for the database write lock instead of failing.
    """
    Taxonomy.objects.filter(pk=taxonomy.pk).update(revision=F("revision"))
    return Taxonomy.objects.get(pk=taxonomy.pk)

@transaction.atomic()
def rebuild_tag_records(taxonomy: Taxonomy) -> int:
    """
    Derive the tag records again from the current master generation of
    `taxonomy`, which is the last one that was committed.

    Returns the number of tag records.
    """
    locked = lock_taxonomy(taxonomy)
    rows = [
        MasterRowItem.from_model(master_row)
        for master_row in MasterTagRow.objects.filter(
            taxonomy=locked, generation=Generation.CURRENT,
        ).order_by("seq_id")
    ]
    records = derive_tag_records(rows)
    replace_tag_records(locked, records)
    log.info("Rebuilt %s tag records for %s", len(records), locked.owner)
    return len(records)


class TagImportPlan:
    """
    Class with functions to build an import plan and execute the plan

    Executing the plan replaces the whole taxonomy of the owner: the master
    rows become the current generation, the old current generation becomes the
    previous one, and all the tag records are derived again.
    """

    rows: list[MasterRowItem]
    records: list[TagRecordItem]
    taxonomy: Taxonomy

    def __init__(self, taxonomy: Taxonomy):
        self.taxonomy = taxonomy
        self.rows = []
        self.records = []

    def generate_records(self, rows: list[MasterRowItem]):
        """
        Derives the tag records for `rows`.

        Raises EmptyTaxonomyError if there are no rows.
        """
        if not rows:
            raise EmptyTaxonomyError()
        self.rows = list(rows)
        self.records = derive_tag_records(self.rows)

    def plan(self) -> str:
        """
        Returns an string with the plan
        """
        result = (
            f"Import plan for {self.taxonomy.owner}\n"
            "--------------------------------\n"
            f"Master rows: {len(self.rows)}\n"
            f"Tag records: {len(self.records)}\n"
        )
        levels = Counter(record.level for record in self.records)
        for level in sorted(levels):
            result += f"  level {level}: {levels[level]}\n"
        return result

    @transaction.atomic()
    def execute(self, task: TagImportTask | None = None):
        """
        Replaces the taxonomy

        Everything happens in one transaction, so readers either see the old
        taxonomy or the new one. Concurrent imports of the same owner wait for
        each other on the taxonomy lock; the last one wins.

        If task is set, creates logs for each step. The task is not saved here,
        so that the logs survive a rollback.
        """
        if not self.rows:
            raise EmptyTaxonomyError()

        taxonomy = lock_taxonomy(self.taxonomy)
        batch_size = get_setting("BULK_BATCH_SIZE")

        MasterTagRow.objects.filter(taxonomy=taxonomy, generation=Generation.PREVIOUS).delete()
        demoted = MasterTagRow.objects.filter(
            taxonomy=taxonomy, generation=Generation.CURRENT,
        ).update(generation=Generation.PREVIOUS)
        if task:
            task.add_log(_("Moved {count} rows to the previous generation").format(count=demoted), save=False)

        MasterTagRow.objects.bulk_create(
            [
                MasterTagRow(
                    taxonomy=taxonomy,
                    generation=Generation.CURRENT,
                    seq_id=seq_id,
                    **dict(zip(HIERARCHY_FIELDS, row.columns)),
                )
                for seq_id, row in enumerate(self.rows, start=1)
            ],
            batch_size=batch_size,
        )
        if task:
            task.add_log(_("Saved {count} rows as the current generation").format(count=len(self.rows)), save=False)

        replace_tag_records(taxonomy, self.records)
        if task:
            task.add_log(_("Replaced the tag records ({count})").format(count=len(self.records)), save=False)

        Taxonomy.objects.filter(pk=taxonomy.pk).update(revision=F("revision") + 1, updated=timezone.now())
        taxonomy.refresh_from_db(fields=["revision", "updated"])
        self.taxonomy = taxonomy
        log.info("Replaced taxonomy of %s (revision %s)", taxonomy.owner, taxonomy.revision)
