"""
Exceptions for master tag list import
"""
from __future__ import annotations

from django.utils.translation import gettext as _


class TagImportError(Exception):
    """
    Base exception for import
    """

    def __init__(self, message: str = ""):
        super().__init__()
        self.message = message

    def __str__(self):
        return str(self.message)

    def __repr__(self):
        return f"{self.__class__.__name__}({str(self)})"


class TagParserError(TagImportError):
    """
    Base exception for parsers

    Parser errors are not fatal: the offending row is skipped and the error is
    logged on the import task.
    """

    def __init__(self, row: int, cells: list[str] | None = None, **kargs):  # pylint: disable=unused-argument
        super().__init__()
        self.row = row
        self.cells = cells or []
        self.message = _("Import parser error on row {row}: {cells}").format(row=row, cells=self.cells)


class InvalidRowFormat(TagParserError):
    """
    Exception used when a row of the master tag list can't be read as a tag
    """

    def __init__(self, row: int, cells: list[str] | None, message: str, **kargs):
        super().__init__(row, cells, **kargs)
        self.message = _("Invalid row {row} {cells}: {message}").format(
            row=row, cells=self.cells, message=message,
        )


class EmptyTaxonomyError(TagImportError):
    """
    Exception used when the submitted master tag list has no tags at all.

    Nothing is changed.
    """

    def __init__(self, **kargs):
        super().__init__(**kargs)
        self.message = _("The master tag list is empty. No tags were imported.")


class TaxonomyStorageError(TagImportError):
    """
    Exception used when the database fails while replacing a taxonomy.

    The replacement is rolled back, so the previous taxonomy is still in place.
    """

    def __init__(self, error: Exception | None = None, **kargs):
        super().__init__(**kargs)
        self.error = error
        self.message = _(
            "Updating the tags failed, so the previous tags were restored. ({error})"
        ).format(error=error)


class TaxonomyRestoreError(TaxonomyStorageError):
    """
    Exception used when restoring the previous taxonomy also failed, after a
    storage error.
    """

    def __init__(self, error: Exception | None = None, restore_error: Exception | None = None, **kargs):
        super().__init__(error, **kargs)
        self.restore_error = restore_error
        self.message = _(
            "Updating the tags failed, and restoring the previous tags also failed. "
            "Please try again or contact support. ({error}; {restore_error})"
        ).format(error=error, restore_error=restore_error)
