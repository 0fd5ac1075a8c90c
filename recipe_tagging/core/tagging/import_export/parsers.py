"""
Parsers to import and export master tag lists

A master tag list is tab-separated text with a header row and one column per
level. A row describes a single tag at the level of its rightmost non-empty
column; the columns to its left are its ancestors:

    l       m       s       ss
    素材別
    素材別  お肉
    素材別  お肉    牛肉
    料理    中華
"""
from __future__ import annotations

from django.utils.translation import gettext as _

from ..models import Generation, MasterTagRow, Taxonomy
from ..models.utils import HIERARCHY_FIELDS, TAG_NAME_MAX_LENGTH, has_whitespace
from .exceptions import InvalidRowFormat, TagParserError
from .import_plan import MasterRowItem

HEADER = "\t".join(HIERARCHY_FIELDS)


class MasterTagParser:
    """
    Converts between the tab-separated master tag list and MasterRowItems.

    It can convert in both directions, for use during import or export:
    the output of `export` can be imported again without changes.
    """

    delimiter = "\t"
    # The first row is the header
    inital_row = 2

    @classmethod
    def parse_import(cls, text: str) -> tuple[list[MasterRowItem], list[TagParserError]]:
        """
        Parse the master tag list and returns rows ready for use in TagImportPlan

        Malformed rows are skipped; they are returned as errors, but they don't
        stop the import.
        """
        rows_data = cls._load_data(text)
        return cls._parse_rows(rows_data)

    @classmethod
    def export(cls, taxonomy: Taxonomy | None, generation: Generation = Generation.CURRENT) -> str:
        """
        Returns the given generation of the master tag list.

        A missing taxonomy exports just the header.
        """
        rows = []
        if taxonomy is not None:
            rows = [
                master_row.columns
                for master_row in MasterTagRow.objects.filter(
                    taxonomy=taxonomy, generation=generation,
                ).order_by("seq_id")
            ]
        return cls._export_data(rows)

    @classmethod
    def _load_data(cls, text: str) -> list[tuple[int, list[str]]]:
        """
        Splits the text in rows of trimmed cells, numbered from the first data row.
        """
        lines = (text or "").strip().split("\n")
        return [
            (row, [cell.strip() for cell in line.rstrip("\r").split(cls.delimiter)])
            for row, line in enumerate(lines[1:], start=cls.inital_row)
        ]

    @classmethod
    def _export_data(cls, rows: list[list[str]]) -> str:
        lines = [cls.delimiter.join(columns) for columns in rows]
        return f"{HEADER}\n" + "\n".join(lines)

    @classmethod
    def _parse_rows(
        cls, rows_data: list[tuple[int, list[str]]]
    ) -> tuple[list[MasterRowItem], list[TagParserError]]:
        """
        Validate each row.

        Return a list of MasterRowItems
        and a list of validation errors.
        """
        rows = []
        errors: list[TagParserError] = []
        for row, cells in rows_data:
            filled = [index for index, cell in enumerate(cells) if cell]
            if not filled:
                # Empty row
                continue

            deepest = filled[-1]
            if deepest >= len(HIERARCHY_FIELDS):
                errors.append(InvalidRowFormat(
                    row, cells,
                    _("A tag can have at most {count} levels").format(count=len(HIERARCHY_FIELDS)),
                ))
                continue

            if len(filled) != deepest + 1:
                errors.append(InvalidRowFormat(row, cells, _("Empty column before the tag name")))
                continue

            if any(has_whitespace(cell) for cell in cells):
                errors.append(InvalidRowFormat(row, cells, _("Tag names cannot contain spaces")))
                continue

            if any(len(cell) > TAG_NAME_MAX_LENGTH for cell in cells):
                errors.append(InvalidRowFormat(
                    row, cells,
                    _("Tag names cannot be longer than {count} characters").format(count=TAG_NAME_MAX_LENGTH),
                ))
                continue

            rows.append(MasterRowItem.from_cells(cells[:deepest + 1], row=row))
        return rows, errors
