"""
Tagging API URLs.
"""

from django.urls import include, path

from .rest_api import urls

app_name = "rt_tagging"
urlpatterns = [path("", include(urls))]
