"""
Tagging API Pagination
"""
from edx_rest_framework_extensions.paginators import DefaultPagination  # type: ignore[import]

from ...conf import get_setting


class RecipeBookmarkPagination(DefaultPagination):
    """
    Pages of recipes, sized by the PAGE_SIZE and MAX_PAGE_SIZE settings.
    """
    page_size_query_param = "page_size"

    def __init__(self):
        super().__init__()
        self.page_size = get_setting("PAGE_SIZE")
        self.max_page_size = get_setting("MAX_PAGE_SIZE")
