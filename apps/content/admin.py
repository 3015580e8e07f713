"""
Django admin configuration for content
"""

from typing import ClassVar

from django.contrib import admin

from .models import Category, Page, PageSection, Post


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display: ClassVar[tuple[str, ...]] = ("name", "slug", "created_at")
    search_fields: ClassVar[tuple[str, ...]] = ("name",)


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display: ClassVar[tuple[str, ...]] = ("title", "status", "category", "author", "published_at", "view_count")
    list_filter: ClassVar[tuple[str, ...]] = ("status", "category")
    search_fields: ClassVar[tuple[str, ...]] = ("title", "excerpt")
    filter_horizontal: ClassVar[tuple[str, ...]] = ("pages",)


class PageSectionInline(admin.TabularInline):
    model = PageSection
    extra = 0
    fields: ClassVar[tuple[str, ...]] = ("type", "name", "sort_order", "is_visible", "is_locked", "is_required")


@admin.register(Page)
class PageAdmin(admin.ModelAdmin):
    list_display: ClassVar[tuple[str, ...]] = ("title", "slug", "status", "template", "parent", "is_homepage")
    list_filter: ClassVar[tuple[str, ...]] = ("status", "template", "use_page_builder")
    search_fields: ClassVar[tuple[str, ...]] = ("title",)
    inlines: ClassVar[list[type[admin.TabularInline]]] = [PageSectionInline]
