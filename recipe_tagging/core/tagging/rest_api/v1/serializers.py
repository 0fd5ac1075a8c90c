"""
API Serializers for tags and recipes
"""
from __future__ import annotations

from rest_framework import serializers

from recipe_tagging.core.tagging.models import Generation, RecipeBookmark
from recipe_tagging.core.tagging.models.utils import TAXONOMY_MAX_DEPTH
from recipe_tagging.core.tagging.tree import TagForest, TagNode


class TagListQueryParamsSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """
    Serializer for the query params for the GET tags view
    """
    level = serializers.IntegerField(required=False, default=0, min_value=0, max_value=TAXONOMY_MAX_DEPTH)
    parent = serializers.CharField(required=False, default="", allow_blank=True)

    def validate(self, attrs):
        """
        Tags below the root level need a parent.
        """
        if attrs["level"] > 0 and not attrs["parent"]:
            raise serializers.ValidationError({"parent": "A parent tag is required for levels greater than 0."})
        return attrs


class BreadcrumbQueryParamsSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """
    Serializer for the query params for the GET breadcrumb view
    """
    full_name = serializers.CharField()


class ItemListQueryParamsSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """
    Serializer for the query params for the GET items view
    """
    tag = serializers.CharField(required=False, default="", allow_blank=True)
    untagged = serializers.BooleanField(required=False, default=False)
    sort = serializers.ChoiceField(choices=["desc", "asc"], required=False, default="desc")


class MasterTagsQueryParamsSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """
    Serializer for the query params for the GET master_tags view
    """
    generation = serializers.ChoiceField(choices=Generation.choices, required=False, default=Generation.CURRENT)


class MasterTagsBodySerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """
    Serializer for the body params for the PUT master_tags view
    """
    master_tags = serializers.CharField(allow_blank=True, trim_whitespace=False)


class ImportResultSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """
    Serializer for the outcome of a master tag list import
    """
    success = serializers.BooleanField()
    message = serializers.CharField()


class DisplayNodeSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """
    Serializer for a DisplayNode: one tag of a drill-down list
    """
    id = serializers.IntegerField()
    disp_name = serializers.CharField()
    full_name = serializers.CharField()
    level = serializers.IntegerField()
    image_uri = serializers.CharField(allow_blank=True)
    has_image = serializers.BooleanField()
    child_count = serializers.IntegerField()
    item_count = serializers.IntegerField()
    marker = serializers.CharField()


class TagNodeSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """
    Serializer for a node of a tag forest, with all its descendants.

    The forest must be passed in the context, as "forest".
    """
    id = serializers.IntegerField()
    level = serializers.IntegerField()
    disp_name = serializers.CharField()
    full_name = serializers.CharField()
    selectable = serializers.BooleanField()
    children = serializers.SerializerMethodField()

    def get_children(self, node: TagNode) -> list[dict]:
        """
        Returns the serialized children of the node.
        """
        forest: TagForest = self.context["forest"]
        return TagNodeSerializer(forest.children(node), many=True, context=self.context).data


class RecipeBookmarkSerializer(serializers.ModelSerializer):
    """
    Serializer for the RecipeBookmark model.
    """
    tags = serializers.ListField(source="tag_names", child=serializers.CharField(), read_only=True)

    class Meta:
        model = RecipeBookmark
        fields = [
            "recipe_id",
            "title",
            "image",
            "rank_score",
            "tags",
        ]
