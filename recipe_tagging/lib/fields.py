"""
Convenience functions to make consistent field conventions easier.

Tag names are compared byte-for-byte: "素材別お肉" and "素材別おにく" are different
tags, and so are "Beef" and "beef". MySQL is case-insensitive by default while
SQLite and Postgres are case-sensitive, so every text column that takes part in
a lookup or a unique index is declared with an explicit per-vendor collation.
"""
from __future__ import annotations

from django.db import models


class MultiCollationMixin:
    """
    Mixin to enable multiple, database-vendor-specific collations.

    This should be mixed into new subclasses of CharField and TextField, since
    they're the only Field types that store text data.
    """

    def __init__(self, *args, db_collations=None, db_collation=None, **kwargs):  # pylint: disable=unused-argument
        """
        Init like any field but add db_collations and disallow db_collation

        The ``db_collations`` param should be a dict of vendor names to
        collations, like::

          {
            'mysql': 'utf8mb4_bin',
            'sqlite': 'BINARY'
          }
        """
        super().__init__(*args, **kwargs)
        self.db_collations = db_collations or {}

    def db_parameters(self, connection):
        """
        Return database parameters for this field, adding the collation that
        maps to ``connection.vendor``.
        """
        db_params = models.Field.db_parameters(self, connection)
        if connection.vendor in self.db_collations:
            db_params["collation"] = self.db_collations[connection.vendor]
        return db_params

    def deconstruct(self):
        """
        Serialize the field for migration files, keeping ``db_collations``.
        """
        name, path, args, kwargs = super().deconstruct()
        if self.db_collations:
            kwargs["db_collations"] = self.db_collations
        return name, path, args, kwargs


class MultiCollationCharField(MultiCollationMixin, models.CharField):
    """
    CharField subclass with per-database-vendor collation settings.
    """


class MultiCollationTextField(MultiCollationMixin, models.TextField):
    """
    TextField subclass with per-database-vendor collation settings.

    We never sort by a TextField, but setting a collation forces the compatible
    charset in MySQL, which matters for the Japanese tag names we store.
    """


def case_sensitive_char_field(**kwargs) -> MultiCollationCharField:
    """
    Return a case-sensitive ``MultiCollationCharField``.

    Unique indexes on these fields are exact: "abc" and "ABC" may both be
    stored. You may override any argument that you would normally pass into
    ``CharField``.
    """
    final_kwargs = {
        "null": False,
        "db_collations": {
            "sqlite": "BINARY",
            "mysql": "utf8mb4_bin",
        },
    }
    final_kwargs.update(kwargs)
    return MultiCollationCharField(**final_kwargs)


def case_sensitive_text_field(**kwargs) -> MultiCollationTextField:
    """
    Return a case-sensitive ``MultiCollationTextField``.
    """
    final_kwargs = {
        "null": False,
        "db_collations": {
            "sqlite": "BINARY",
            "mysql": "utf8mb4_bin",
        },
    }
    final_kwargs.update(kwargs)
    return MultiCollationTextField(**final_kwargs)


def tag_name_field(max_length=190, **kwargs) -> MultiCollationCharField:
    """
    A case-sensitive column holding one tag name (or one hierarchy key).

    The default length keeps a four-level concatenation, and indexes over
    three of these columns, within the MySQL utf8mb4 index size limit.
    """
    return case_sensitive_char_field(max_length=max_length, **kwargs)
