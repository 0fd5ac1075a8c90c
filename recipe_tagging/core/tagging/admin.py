"""
Tagging app admin
"""
from __future__ import annotations

from django.contrib import admin

from .models import MasterTagRow, RecipeBookmark, TagImportTask, TagRecord, Taxonomy

admin.site.register(Taxonomy)


@admin.register(TagRecord)
class TagRecordAdmin(admin.ModelAdmin):
    """
    Admin definition for TagRecord model
    """
    search_fields = ["full_name", "disp_name"]
    list_display = ["__str__", "taxonomy", "level", "disp_name"]
    list_filter = ["taxonomy", "level"]

    def has_add_permission(self, request):
        """
        Don't create TagRecords using the django admin. Import a master tag list instead.
        """
        return False

    def has_change_permission(self, request, obj=None):
        """
        TagRecords are only replaced by imports.
        """
        return False

    def has_view_permission(self, request, obj=None):
        """
        A TagRecord can be browsed by whoever can browse its taxonomy.
        """
        return request.user.has_perm("rt_tagging.view_tagrecord", obj.taxonomy if obj else None)


@admin.register(MasterTagRow)
class MasterTagRowAdmin(admin.ModelAdmin):
    """
    Admin definition for MasterTagRow model
    """
    list_display = ["__str__", "taxonomy", "generation", "seq_id"]
    list_filter = ["taxonomy", "generation"]

    def has_add_permission(self, request):
        """
        Don't create MasterTagRows using the django admin. Import a master tag list instead.
        """
        return False


@admin.register(TagImportTask)
class TagImportTaskAdmin(admin.ModelAdmin):
    """
    Admin definition for TagImportTask model
    """
    list_display = ["__str__", "taxonomy", "status", "creation_date"]
    list_filter = ["status"]
    readonly_fields = ["taxonomy", "status", "log", "creation_date"]


@admin.register(RecipeBookmark)
class RecipeBookmarkAdmin(admin.ModelAdmin):
    """
    Admin definition for RecipeBookmark model
    """
    search_fields = ["title", "tags"]
    list_display = ["recipe_id", "owner", "title", "rank_score"]
    list_filter = ["owner"]
