"""
Import/export API functions

Import
------------

The whole taxonomy of an owner is replaced from a master tag list, with the
following pipeline:

MasterTagParser.parse_import() -> TagImportPlan.generate_records()
-> TagImportPlan.plan() -> TagImportPlan.execute()

The parser reads the tab-separated text and returns a list of MasterRowItems,
plus an error for every malformed row. Malformed rows are skipped; they don't
stop the import. For more information see parsers.py

TagImportPlan derives the tag records from the rows and replaces the master
rows and the tag records in a single transaction. For more information see
import_plan.py

Each import creates a TagImportTask that keeps the logs of every step and the
final status.

If the database fails while replacing the taxonomy, the transaction is rolled
back and the tag records are derived again from the last committed master
generation, so they are consistent with it.

Export
----------

The export only uses the parser. It returns the current (or the previous)
generation of the master tag list, in the same format that is imported.
"""
from __future__ import annotations

import logging

from attrs import define
from django.db import DatabaseError
from django.utils.translation import gettext as _

from ..models import Generation, TagImportTask, TagImportTaskState, Taxonomy
from .exceptions import TagImportError, TaxonomyRestoreError, TaxonomyStorageError
from .import_plan import TagImportPlan, rebuild_tag_records
from .parsers import MasterTagParser

log = logging.getLogger(__name__)


@define
class ImportResult:
    """
    Outcome of an import, with a message to show the user
    """

    success: bool
    message: str
    task: TagImportTask
    error: TagImportError | None = None
    plan: TagImportPlan | None = None


def import_taxonomy(owner: str, raw_text: str) -> ImportResult:
    """
    Replaces the taxonomy of `owner` with the master tag list in `raw_text`

    You can read the docstring of the top for more info about the
    pipeline.

    Returns a failed result (and changes nothing) if the list is empty, and
    a failed result if the database fails while saving; in that case the
    previous taxonomy is kept.
    """
    taxonomy, _created = Taxonomy.objects.get_or_create(owner=owner)

    # Creating import task
    task = TagImportTask.create(taxonomy)
    plan = None

    try:
        task.log_parser_start()
        rows, errors = MasterTagParser.parse_import(raw_text)
        task.log_parser_end(len(rows), errors)

        plan = TagImportPlan(taxonomy)
        plan.generate_records(rows)

        task.log_start_execute(plan)
        try:
            plan.execute(task)
        except DatabaseError as db_error:
            log.exception("Replacing the taxonomy of %s failed", owner)
            raise _restore_after_failure(taxonomy, task, db_error) from db_error

        task.end_success()
        return ImportResult(
            success=True,
            message=_("Tags updated: {count} tags").format(count=len(plan.records)),
            task=task,
            plan=plan,
        )
    except TagImportError as error:
        task.log_exception(error)
        return ImportResult(success=False, message=str(error), task=task, error=error, plan=plan)
    except Exception as exception:  # pylint: disable=broad-exception-caught
        # Log any exception
        log.exception("Unexpected error importing the taxonomy of %s", owner)
        task.log_exception(exception)
        return ImportResult(success=False, message=_("Updating the tags failed."), task=task, plan=plan)


def load_generation(owner: str, previous=False) -> str:
    """
    Returns the current (or, with `previous`, the previous) master tag list of
    `owner`, in the import format.

    Importing the result of this function leaves the taxonomy unchanged.
    """
    taxonomy = Taxonomy.objects.filter(owner=owner).first()
    generation = Generation.PREVIOUS if previous else Generation.CURRENT
    return MasterTagParser.export(taxonomy, generation)


def restore_previous_generation(owner: str) -> ImportResult:
    """
    Imports the previous master tag list of `owner` again, undoing the last import.

    The generation that is replaced becomes the previous one, so calling this
    twice goes back to where we started.
    """
    return import_taxonomy(owner, load_generation(owner, previous=True))


def get_last_import_status(owner: str) -> TagImportTaskState:
    """
    Get status of the last import task of the given owner
    """
    task = _get_last_import_task(owner)
    if task is None:
        raise ValueError("No import task was created yet.")
    return TagImportTaskState(task.status)


def get_last_import_log(owner: str) -> str:
    """
    Get logs of the last import task of the given owner
    """
    task = _get_last_import_task(owner)
    if task is None:
        raise ValueError("No import task was created yet.")
    return task.log


def _get_last_import_task(owner: str) -> TagImportTask | None:
    """
    Get the last import task for the given owner
    """
    return (
        TagImportTask.objects.filter(taxonomy__owner=owner)
        .order_by("-creation_date", "-id")
        .first()
    )


def _restore_after_failure(taxonomy: Taxonomy, task: TagImportTask, error: Exception) -> TaxonomyStorageError:
    """
    Rebuilds the tag records from the last committed generation after a failed
    replacement, and returns the error to report.
    """
    try:
        count = rebuild_tag_records(taxonomy)
    except DatabaseError as restore_error:
        log.exception("Restoring the taxonomy of %s failed", taxonomy.owner)
        return TaxonomyRestoreError(error, restore_error)
    task.add_log(_("Restored {count} tags from the current generation").format(count=count), save=False)
    return TaxonomyStorageError(error)
