from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("tagging/rest_api/", include("recipe_tagging.core.tagging.urls")),
    # path('__debug__/', include('debug_toolbar.urls')),
]
