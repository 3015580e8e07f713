# ===============================================================================
# CONTENT API SERIALIZERS 📰
# ===============================================================================

from __future__ import annotations

from typing import Any

from rest_framework import serializers

from apps.api.core import CamelCaseModelSerializer, CamelCaseSerializer
from apps.common.constants import EXCERPT_MAX_LENGTH, SLUG_MAX_LENGTH, TITLE_MAX_LENGTH
from apps.content.models import STATUS_CHOICES, Category, Page, PageSection, Post
from apps.content.section_configs import SECTION_CONFIGS
from apps.users.models import User


class AuthorSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ("id", "name", "email")
        read_only_fields = fields


# ===============================================================================
# CATEGORIES 📂
# ===============================================================================


class CategorySerializer(CamelCaseModelSerializer):
    posts_count = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = ("id", "name", "slug", "description", "posts_count", "created_at", "updated_at")
        read_only_fields = fields

    def get_posts_count(self, obj: Category) -> int:
        annotated = getattr(obj, "posts_count", None)
        return annotated if annotated is not None else obj.posts.count()


class CategoryWriteSerializer(CamelCaseSerializer):
    name = serializers.CharField(max_length=100, required=False)
    slug = serializers.CharField(max_length=SLUG_MAX_LENGTH, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)


class CategoryBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ("id", "name", "slug")
        read_only_fields = fields


# ===============================================================================
# POSTS 📰
# ===============================================================================


class PostSerializer(CamelCaseModelSerializer):
    author = AuthorSerializer(read_only=True)
    category = CategoryBriefSerializer(read_only=True)
    category_id = serializers.IntegerField(read_only=True)
    page_ids = serializers.SerializerMethodField()

    class Meta:
        model = Post
        fields = (
            "id",
            "title",
            "slug",
            "excerpt",
            "content",
            "status",
            "featured_image",
            "view_count",
            "published_at",
            "author",
            "category",
            "category_id",
            "page_ids",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields

    def get_page_ids(self, obj: Post) -> list[int]:
        return [page.pk for page in obj.pages.all()]


class PostWriteSerializer(CamelCaseSerializer):
    title = serializers.CharField(max_length=TITLE_MAX_LENGTH, required=False)
    slug = serializers.CharField(max_length=SLUG_MAX_LENGTH, required=False, allow_blank=True)
    excerpt = serializers.CharField(max_length=EXCERPT_MAX_LENGTH, required=False, allow_blank=True)
    content = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=STATUS_CHOICES, required=False)
    featured_image = serializers.CharField(max_length=500, required=False, allow_blank=True)
    category_id = serializers.IntegerField(required=False, allow_null=True)
    page_ids = serializers.ListField(child=serializers.IntegerField(), required=False)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if not self.partial and not (attrs.get("title") or "").strip():
            raise serializers.ValidationError({"title": "This field is required."})
        return attrs


# ===============================================================================
# PAGES & SECTIONS 📄
# ===============================================================================


class PageSectionSerializer(CamelCaseModelSerializer):
    page_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = PageSection
        fields = (
            "id",
            "page_id",
            "type",
            "name",
            "data",
            "sort_order",
            "is_visible",
            "is_locked",
            "is_required",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class PageSerializer(CamelCaseModelSerializer):
    author = AuthorSerializer(read_only=True)
    parent_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Page
        fields = (
            "id",
            "title",
            "slug",
            "content",
            "status",
            "template",
            "sort_order",
            "parent_id",
            "use_page_builder",
            "is_homepage",
            "allowed_section_types",
            "author",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class PageWithSectionsSerializer(PageSerializer):
    sections = serializers.SerializerMethodField()

    class Meta(PageSerializer.Meta):
        fields = (*PageSerializer.Meta.fields, "sections")
        read_only_fields = fields

    def get_sections(self, obj: Page) -> list[dict[str, Any]]:
        visible_only = self.context.get("visible_only", False)
        queryset = obj.sections.filter(is_visible=True) if visible_only else obj.sections.all()
        return PageSectionSerializer(queryset.order_by("sort_order", "id"), many=True).data


class PageWriteSerializer(CamelCaseSerializer):
    title = serializers.CharField(max_length=TITLE_MAX_LENGTH, required=False)
    slug = serializers.CharField(max_length=SLUG_MAX_LENGTH, required=False, allow_blank=True)
    content = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=STATUS_CHOICES, required=False)
    template = serializers.CharField(max_length=50, required=False, allow_blank=True)
    parent_id = serializers.IntegerField(required=False, allow_null=True)
    sort_order = serializers.IntegerField(required=False, min_value=0)
    use_page_builder = serializers.BooleanField(required=False)
    is_homepage = serializers.BooleanField(required=False)
    allowed_section_types = serializers.ListField(
        child=serializers.ChoiceField(choices=list(SECTION_CONFIGS)), required=False
    )

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if not self.partial and not (attrs.get("title") or "").strip():
            raise serializers.ValidationError({"title": "This field is required."})
        return attrs


class SectionWriteSerializer(CamelCaseSerializer):
    type = serializers.CharField(max_length=50, required=False)
    name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    data = serializers.DictField(required=False)
    is_visible = serializers.BooleanField(required=False)


class SortOrderItemSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    sortOrder = serializers.IntegerField(min_value=0)  # noqa: N815


class SectionReorderSerializer(serializers.Serializer):
    sections = SortOrderItemSerializer(many=True, allow_empty=False)
