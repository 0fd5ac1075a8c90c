"""
Tagging API v1 URLs.
"""

from django.urls.conf import include, path
from rest_framework.routers import DefaultRouter

from . import views

router = DefaultRouter()
router.register("tags", views.TagView, basename="tag")
router.register("items", views.RecipeBookmarkView, basename="item")

urlpatterns = [
    path("", include(router.urls)),
    path(
        "master_tags/",
        views.MasterTagsView.as_view(),
        name="master-tags",
    ),
]
