"""
Tagging API Views
"""
from __future__ import annotations

import logging

from django.db import models
from django.http import HttpResponse
from rest_framework import mixins, status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet, ViewSet

from ...api import breadcrumb, find_items_by_tag, find_untagged_items, get_tag_tree, list_children
from ...import_export.api import import_taxonomy, load_generation
from ...import_export.exceptions import EmptyTaxonomyError
from ...models import Generation, Taxonomy
from ..utils import request_owner, view_auth_classes
from .pagination import RecipeBookmarkPagination
from .permissions import TaxonomyObjectPermissions
from .serializers import (
    BreadcrumbQueryParamsSerializer,
    DisplayNodeSerializer,
    ImportResultSerializer,
    ItemListQueryParamsSerializer,
    MasterTagsBodySerializer,
    MasterTagsQueryParamsSerializer,
    RecipeBookmarkSerializer,
    TagListQueryParamsSerializer,
    TagNodeSerializer,
)

log = logging.getLogger(__name__)


class OwnTaxonomyMixin:
    """
    Checks the object permissions of the requesting user's taxonomy, if it exists.
    """

    def check_own_taxonomy(self, request: Request) -> Taxonomy | None:
        taxonomy = Taxonomy.objects.filter(owner=request_owner(request)).first()
        if taxonomy is not None:
            self.check_object_permissions(request, taxonomy)  # type: ignore[attr-defined]
        return taxonomy


@view_auth_classes
class TagView(OwnTaxonomyMixin, ViewSet):
    """
    View to browse the tags of the requesting user.

    **List Query Parameters**
        * level (optional) - Level of the tags to list, 0 to 3 (default: 0)
        * parent (required if level > 0) - Full name of the parent tag

    **List Example Requests**
        GET tagging/rest_api/v1/tags/                          - Get the root tags
        GET tagging/rest_api/v1/tags/?level=1&parent=素材別     - Get the children of 素材別

    **List Query Returns**
        * 200 - Success. An unknown parent returns an empty list.
        * 400 - Invalid query parameter
        * 401 - Not authenticated

    **Breadcrumb Query Parameters**
        * full_name (required) - Full name of the tag

    **Breadcrumb Example Requests**
        GET tagging/rest_api/v1/tags/breadcrumb/?full_name=素材別お肉牛肉

    **Breadcrumb Query Returns**
        * 200 - The tags from the root down to the given tag. Empty for an unknown tag.

    **Tree Query Parameters**
        * prefix (optional, repeatable) - Only return the trees whose root tag starts with a prefix

    **Tree Example Requests**
        GET tagging/rest_api/v1/tags/tree/?prefix=素材別&prefix=料理
    """

    permission_classes = [TaxonomyObjectPermissions]

    def list(self, request: Request, **_kwargs) -> Response:
        """
        Lists the tags at a level of the drill-down navigation.
        """
        self.check_own_taxonomy(request)
        query_params = TagListQueryParamsSerializer(data=request.query_params.dict())
        query_params.is_valid(raise_exception=True)
        nodes = list_children(
            request_owner(request),
            query_params.validated_data["level"],
            query_params.validated_data["parent"],
        )
        return Response(DisplayNodeSerializer(nodes, many=True).data)

    @action(detail=False, methods=["get"])
    def breadcrumb(self, request: Request, **_kwargs) -> Response:
        """
        Returns the path from the root down to a tag.
        """
        self.check_own_taxonomy(request)
        query_params = BreadcrumbQueryParamsSerializer(data=request.query_params.dict())
        query_params.is_valid(raise_exception=True)
        nodes = breadcrumb(request_owner(request), query_params.validated_data["full_name"])
        return Response(DisplayNodeSerializer(nodes, many=True).data)

    @action(detail=False, methods=["get"])
    def tree(self, request: Request, **_kwargs) -> Response:
        """
        Returns the tags as nested trees.
        """
        self.check_own_taxonomy(request)
        prefixes = [prefix for prefix in request.query_params.getlist("prefix") if prefix]
        forest = get_tag_tree(request_owner(request), prefixes)
        serializer = TagNodeSerializer(forest.roots, many=True, context={"forest": forest})
        return Response(serializer.data)


@view_auth_classes
class RecipeBookmarkView(OwnTaxonomyMixin, mixins.ListModelMixin, GenericViewSet):
    """
    View to list the recipes of the requesting user that have a tag.

    **List Query Parameters**
        * tag (optional) - Full name of the tag. Only whole tags match.
        * untagged (optional) - List the recipes without tags instead
        * sort (optional) - "desc" (most popular first, the default) or "asc"
        * page (optional) - Page number (default: 1)
        * page_size (optional) - Number of recipes per page

    **List Example Requests**
        GET tagging/rest_api/v1/items/?tag=素材別お肉牛肉
        GET tagging/rest_api/v1/items/?untagged=true

    **List Query Returns**
        * 200 - Success. No tag (or an unknown tag) returns no recipes.
        * 400 - Invalid query parameter
        * 401 - Not authenticated
    """

    permission_classes = [TaxonomyObjectPermissions]
    pagination_class = RecipeBookmarkPagination
    serializer_class = RecipeBookmarkSerializer

    def get_queryset(self) -> models.QuerySet:
        """
        Return the recipes matching the query params.
        """
        self.check_own_taxonomy(self.request)
        query_params = ItemListQueryParamsSerializer(data=self.request.query_params.dict())
        query_params.is_valid(raise_exception=True)
        owner = request_owner(self.request)
        if query_params.validated_data["untagged"]:
            return find_untagged_items(owner)
        return find_items_by_tag(owner, query_params.validated_data["tag"], query_params.validated_data["sort"])


@view_auth_classes
class MasterTagsView(OwnTaxonomyMixin, APIView):
    """
    View to read or replace the master tag list of the requesting user.

    **Get Query Parameters**
        * generation (optional) - "current" (default) or "previous"

    **Get Example Requests**
        GET tagging/rest_api/v1/master_tags/
        GET tagging/rest_api/v1/master_tags/?generation=previous

    **Get Query Returns**
        * 200 - The tab-separated master tag list, with a header row

    **Put Parameters**
        * master_tags (required) - The tab-separated master tag list, with a header row

    **Put Example Requests**
        PUT tagging/rest_api/v1/master_tags/ - Replace the whole taxonomy
        {
            "master_tags": "l\\tm\\ts\\tss\\n素材別\\tお肉\\t牛肉"
        }

    **Put Query Returns**
        * 200 - Success
        * 400 - The master tag list is empty, nothing was changed
        * 500 - Saving the tags failed, the previous tags were kept
    """

    permission_classes = [TaxonomyObjectPermissions]

    def get(self, request: Request) -> HttpResponse:
        """
        Exports a generation of the master tag list.
        """
        self.check_own_taxonomy(request)
        query_params = MasterTagsQueryParamsSerializer(data=request.query_params.dict())
        query_params.is_valid(raise_exception=True)
        previous = query_params.validated_data["generation"] == Generation.PREVIOUS
        text = load_generation(request_owner(request), previous=previous)
        return HttpResponse(text, content_type="text/tab-separated-values; charset=utf-8")

    def put(self, request: Request) -> Response:
        """
        Replaces the taxonomy with the given master tag list.
        """
        self.check_own_taxonomy(request)
        body = MasterTagsBodySerializer(data=request.data)
        body.is_valid(raise_exception=True)

        result = import_taxonomy(request_owner(request), body.validated_data["master_tags"])
        serializer = ImportResultSerializer(result)
        if result.success:
            return Response(serializer.data)
        if isinstance(result.error, EmptyTaxonomyError):
            return Response(serializer.data, status=status.HTTP_400_BAD_REQUEST)
        log.error("Master tag import failed for %s: %s", request_owner(request), result.message)
        return Response(serializer.data, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
