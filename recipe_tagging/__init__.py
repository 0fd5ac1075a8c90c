"""
Recipe Tagging: hierarchical tag taxonomy engine for recipe bookmarks.
"""

__version__ = "0.1.0"
