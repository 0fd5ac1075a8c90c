"""
Models used by the master tag list import.
"""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Iterable

from django.db import models
from django.utils.translation import gettext as _
from django.utils.translation import gettext_lazy

from .base import Taxonomy

if TYPE_CHECKING:
    from ..import_export.import_plan import TagImportPlan


class TagImportTaskState(models.TextChoices):
    """
    Enumerates the states that a TagImportTask can be in.
    """
    LOADING_DATA = "loading_data", gettext_lazy("Loading Data")
    EXECUTING = "executing", gettext_lazy("Executing")
    SUCCESS = "success", gettext_lazy("Success")
    ERROR = "error", gettext_lazy("Error")


class TagImportTask(models.Model):
    """
    Stores the state and logs of a master tag list import
    """

    id = models.BigAutoField(primary_key=True)

    taxonomy = models.ForeignKey(
        Taxonomy,
        on_delete=models.CASCADE,
        related_name="import_tasks",
        help_text=gettext_lazy("Taxonomy associated with this import"),
    )

    log = models.TextField(
        blank=True, default="", help_text=gettext_lazy("Import execution logs")
    )

    status = models.CharField(
        max_length=20,
        choices=TagImportTaskState.choices,
        help_text=gettext_lazy("Task status"),
    )

    creation_date = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["taxonomy", "-creation_date"], name="rt_importtask_created_idx"),
        ]

    def __str__(self):
        return f"<{self.__class__.__name__}> ({self.id}) {self.status}"

    @classmethod
    def create(cls, taxonomy: Taxonomy):
        """
        Creates and logs a new TagImportTask.
        """
        task = cls(
            taxonomy=taxonomy,
            status=TagImportTaskState.LOADING_DATA.value,
            log="",
        )
        task.add_log(_("Import task created"), save=False)
        task.save()
        return task

    def add_log(self, message: str, save=True):
        """
        Appends a log message to the task.
        """
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        self.log += f"[{timestamp}] {message}\n"
        if save:
            self.save()

    def log_exception(self, exception: Exception):
        """
        Logs an exception and moves the task status to ERROR.
        """
        self.add_log(repr(exception), save=False)
        self.status = TagImportTaskState.ERROR.value
        self.save()

    def log_parser_start(self):
        self.add_log(_("Starting to load data from the master tag list"))

    def log_parser_end(self, row_count: int, errors: Iterable):
        """
        Logs the parsed row count and any skipped rows.

        Skipped rows don't stop the import.
        """
        for error in errors:
            self.add_log(_("Skipped: {error}").format(error=error), save=False)
        self.add_log(_("Load data finished: {count} rows").format(count=row_count))

    def log_start_execute(self, plan: TagImportPlan):
        """
        Starts task execution with the plan summary, and moves the task status to EXECUTING.
        """
        self.add_log(_("Starting to replace the taxonomy"), save=False)
        self.log += f"\n{plan.plan()}\n"
        self.status = TagImportTaskState.EXECUTING.value
        self.save()

    def end_success(self):
        """
        Completes task execution with a log message, and moves the task status to SUCCESS.
        """
        self.add_log(_("Execution finished"), save=False)
        self.status = TagImportTaskState.SUCCESS.value
        self.save()
