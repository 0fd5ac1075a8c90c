"""
Core models for Tagging
"""
from .base import Generation, MasterTagRow, TagRecord, Taxonomy
from .bookmarks import RecipeBookmark
from .import_export import TagImportTask, TagImportTaskState
