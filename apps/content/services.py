"""
Content services for the Municipal CMS Platform
Categories, posts and the page tree.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from django.db.models import Count, F, Q, QuerySet
from django.utils.translation import gettext as _

from apps.common.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from apps.common.security_decorators import atomic_with_retry, audit_service_call
from apps.common.transliteration import highlight_patterns
from apps.common.types import Err, Ok, Result, ServiceError, forbidden, invalid, not_found
from apps.common.utils import unique_slug
from apps.users.models import User

from . import page_tree
from .models import STATUS_CHOICES, STATUS_PUBLISHED, Category, Page, Post
from .templates import DEFAULT_TEMPLATE, template_exists

logger = logging.getLogger(__name__)

_STATUSES = {value for value, _label in STATUS_CHOICES}


def _script_insensitive_q(query: str, *fields: str) -> Q:
    """OR of ``icontains`` over ``fields`` for the query in both scripts"""
    condition = Q()
    for pattern in highlight_patterns(query):
        for name in fields:
            condition |= Q(**{f"{name}__icontains": pattern})
    return condition


def _check_status(status: str) -> Err[ServiceError] | None:
    if status not in _STATUSES:
        return invalid(_("Unknown status"), "status")
    return None


# ===============================================================================
# CATEGORY SERVICE
# ===============================================================================


class CategoryService:
    """📂 Post categories"""

    @staticmethod
    def list() -> QuerySet[Category]:
        """Categories with ``posts_count``"""
        return Category.objects.annotate(posts_count=Count("posts", distinct=True)).order_by("name")

    @staticmethod
    def with_published_posts() -> QuerySet[Category]:
        return Category.objects.annotate(
            posts_count=Count("posts", filter=Q(posts__status=STATUS_PUBLISHED), distinct=True)
        ).order_by("name")

    @staticmethod
    def get_by_slug(slug: str) -> Result[Category, ServiceError]:
        category = Category.objects.filter(slug=slug).first()
        if category is None:
            return not_found(_("Category not found"))
        return Ok(category)

    @staticmethod
    @audit_service_call("category_create")
    def create(name: str, description: str = "", slug: str = "") -> Result[Category, ServiceError]:
        if not (name or "").strip():
            return invalid(_("Name is required"), "name")
        category = Category.objects.create(name=name.strip(), description=description or "", slug=slug or "")
        logger.info(f"✅ [Categories] Created {category.slug}")
        return Ok(category)

    @staticmethod
    def update(category: Category, **fields: Any) -> Result[Category, ServiceError]:
        if "name" in fields:
            if not (fields["name"] or "").strip():
                return invalid(_("Name is required"), "name")
            category.name = fields["name"].strip()
        if "description" in fields:
            category.description = fields["description"] or ""
        if fields.get("slug"):
            category.slug = fields["slug"]
        category.save()
        return Ok(category)

    @staticmethod
    def delete(category: Category) -> None:
        # Posts keep existing without a category (SET_NULL)
        name = category.name
        category.delete()
        logger.warning(f"🗑️ [Categories] Deleted {name}")


# ===============================================================================
# POST SERVICE
# ===============================================================================


@dataclass
class PostCreationRequest:
    """Parameter object for post creation"""

    title: str
    content: str = ""
    excerpt: str = ""
    status: str = "draft"
    slug: str = ""
    featured_image: str = ""
    category_id: int | None = None
    page_ids: list[int] = field(default_factory=list)


class PostService:
    """📰 News posts"""

    EDITABLE_FIELDS = ("title", "content", "excerpt", "status", "featured_image", "category_id")

    @staticmethod
    def list(
        status: str | None = None,
        category: str | int | None = None,
        search: str | None = None,
        author: int | None = None,
    ) -> QuerySet[Post]:
        queryset = Post.objects.select_related("author", "category").prefetch_related("pages")
        if status:
            queryset = queryset.filter(status=status)
        if category:
            if str(category).isdigit():
                queryset = queryset.filter(category_id=int(category))
            else:
                queryset = queryset.filter(category__slug=category)
        if author:
            queryset = queryset.filter(author_id=author)
        if search and search.strip():
            queryset = queryset.filter(_script_insensitive_q(search.strip(), "title", "excerpt", "content"))
        return queryset.order_by("-created_at")

    @classmethod
    def paged(cls, page: int = 1, limit: int = DEFAULT_PAGE_SIZE, **filters: Any) -> dict[str, Any]:
        """``{posts, total, page, totalPages}`` slice of :meth:`list`"""
        limit = min(max(1, limit), MAX_PAGE_SIZE)
        queryset = cls.list(**filters)
        total = queryset.count()
        total_pages = max(1, math.ceil(total / limit))
        page = min(max(1, page), total_pages)
        offset = (page - 1) * limit
        return {
            "posts": list(queryset[offset : offset + limit]),
            "total": total,
            "page": page,
            "totalPages": total_pages,
        }

    @staticmethod
    def published() -> QuerySet[Post]:
        return (
            Post.objects.filter(status=STATUS_PUBLISHED)
            .select_related("author", "category")
            .order_by("-published_at", "-created_at")
        )

    @classmethod
    def get_by_slug(cls, slug: str, published_only: bool = False) -> Result[Post, ServiceError]:
        queryset = cls.published() if published_only else Post.objects.select_related("author", "category")
        post = queryset.filter(slug=slug).first()
        if post is None:
            return not_found(_("Post not found"))
        return Ok(post)

    @classmethod
    def by_page(cls, page_id: int, limit: int | None = None) -> QuerySet[Post]:
        queryset = cls.published().filter(pages__id=page_id).distinct()
        return queryset[:limit] if limit else queryset

    @classmethod
    def by_page_slug(cls, slug: str, limit: int | None = None) -> QuerySet[Post]:
        queryset = cls.published().filter(pages__slug=slug).distinct()
        return queryset[:limit] if limit else queryset

    @classmethod
    def homepage(cls, limit: int = 6) -> QuerySet[Post]:
        return cls.published()[: max(1, limit)]

    @staticmethod
    def can_edit(post: Post, user: User | None) -> bool:
        if user is None or not user.is_authenticated:
            return False
        return user.is_admin_role or post.author_id == user.pk

    @staticmethod
    def _validate_relations(category_id: int | None, page_ids: list[int] | None) -> Err[ServiceError] | None:
        if category_id and not Category.objects.filter(pk=category_id).exists():
            return invalid(_("Category does not exist"), "categoryId")
        if page_ids and Page.objects.filter(pk__in=page_ids).count() != len(set(page_ids)):
            return invalid(_("One or more pages do not exist"), "pageIds")
        return None

    @classmethod
    @atomic_with_retry()
    @audit_service_call("post_create")
    def create(cls, request: PostCreationRequest, author: User | None = None) -> Result[Post, ServiceError]:
        if not (request.title or "").strip():
            return invalid(_("Title is required"), "title")
        if error := _check_status(request.status):
            return error
        if error := cls._validate_relations(request.category_id, request.page_ids):
            return error

        post = Post.objects.create(
            title=request.title.strip(),
            slug=request.slug,
            content=request.content or "",
            excerpt=request.excerpt or "",
            status=request.status,
            featured_image=request.featured_image or "",
            category_id=request.category_id,
            author=author,
        )
        if request.page_ids:
            post.pages.set(request.page_ids)

        logger.info(f"✅ [Posts] Created {post.status} post {post.slug}")
        return Ok(post)

    @classmethod
    @atomic_with_retry()
    @audit_service_call("post_update")
    def update(cls, post: Post, user: User | None = None, **fields: Any) -> Result[Post, ServiceError]:
        if user is not None and not cls.can_edit(post, user):
            return forbidden(_("You can only edit your own posts"))
        if "title" in fields and not (fields["title"] or "").strip():
            return invalid(_("Title is required"), "title")
        if "status" in fields and (error := _check_status(fields["status"])):
            return error
        page_ids = fields.pop("page_ids", None)
        if error := cls._validate_relations(fields.get("category_id"), page_ids):
            return error

        for name in cls.EDITABLE_FIELDS:
            if name in fields:
                setattr(post, name, fields[name])
        if fields.get("slug"):
            post.slug = unique_slug(Post, fields["slug"], instance_pk=post.pk)
        post.save()
        if page_ids is not None:
            post.pages.set(page_ids)

        logger.info(f"✅ [Posts] Updated {post.slug}")
        return Ok(post)

    @classmethod
    @audit_service_call("post_delete")
    def delete(cls, post: Post, user: User | None = None) -> Result[int, ServiceError]:
        if user is not None and not cls.can_edit(post, user):
            return forbidden(_("You can only delete your own posts"))
        post_id = post.pk
        post.delete()
        logger.warning(f"🗑️ [Posts] Deleted post {post_id}")
        return Ok(post_id)

    @staticmethod
    def increment_view(slug: str) -> Result[int, ServiceError]:
        """Atomically bump ``view_count`` of a published post; returns the new count"""
        updated = Post.objects.filter(slug=slug, status=STATUS_PUBLISHED).update(view_count=F("view_count") + 1)
        if not updated:
            return not_found(_("Post not found"))
        return Ok(Post.objects.values_list("view_count", flat=True).get(slug=slug))


# ===============================================================================
# PAGE SERVICE
# ===============================================================================


@dataclass
class PageCreationRequest:
    """Parameter object for page creation"""

    title: str
    content: str = ""
    status: str = "draft"
    slug: str = ""
    template: str = DEFAULT_TEMPLATE
    parent_id: int | None = None
    sort_order: int = 0
    use_page_builder: bool = False
    is_homepage: bool = False
    allowed_section_types: list[str] = field(default_factory=list)


def _page_node(page: Page) -> dict[str, Any]:
    return {
        "id": page.id,
        "title": page.title,
        "slug": page.slug,
        "status": page.status,
        "template": page.template,
        "parentId": page.parent_id,
        "sortOrder": page.sort_order,
    }


class PageService:
    """📄 Pages and their hierarchy"""

    EDITABLE_FIELDS = (
        "title",
        "content",
        "status",
        "template",
        "sort_order",
        "use_page_builder",
        "is_homepage",
        "allowed_section_types",
    )

    @staticmethod
    def list(status: str | None = None, search: str | None = None) -> QuerySet[Page]:
        queryset = Page.objects.select_related("author", "parent")
        if status:
            queryset = queryset.filter(status=status)
        if search and search.strip():
            queryset = queryset.filter(_script_insensitive_q(search.strip(), "title", "content"))
        return queryset.order_by("sort_order", "title")

    @staticmethod
    def published() -> QuerySet[Page]:
        return Page.objects.filter(status=STATUS_PUBLISHED).order_by("sort_order", "title")

    @staticmethod
    def hierarchical(published_only: bool = False) -> list[dict[str, Any]]:
        queryset = Page.objects.filter(status=STATUS_PUBLISHED) if published_only else Page.objects.all()
        return page_tree.build_hierarchy(list(queryset), serialize=_page_node)

    @staticmethod
    def get_by_slug(slug: str, published_only: bool = False) -> Result[Page, ServiceError]:
        queryset = Page.objects.filter(status=STATUS_PUBLISHED) if published_only else Page.objects.all()
        page = queryset.filter(slug=slug).first()
        if page is None:
            return not_found(_("Page not found"))
        return Ok(page)

    @staticmethod
    def homepage() -> Page | None:
        return Page.objects.filter(is_homepage=True, status=STATUS_PUBLISHED).first()

    @staticmethod
    def for_selection() -> list[dict[str, Any]]:
        """Flat list for pickers; titles indented by depth"""
        return [
            {"id": page.id, "title": f"{'— ' * depth}{page.title}", "depth": depth, "slug": page.slug}
            for page, depth in page_tree.flatten_pages(list(Page.objects.all()))
        ]

    @staticmethod
    def available_parents(exclude_id: int | None = None) -> list[Page]:
        """Pages that may become the parent of ``exclude_id``"""
        pages = list(Page.objects.all())
        if exclude_id is None:
            return page_tree.sort_pages_by_hierarchy(pages)
        blocked = page_tree.get_descendant_ids(exclude_id, pages) | {exclude_id}
        return [page for page in page_tree.sort_pages_by_hierarchy(pages) if page.id not in blocked]

    @staticmethod
    def _validate(fields: dict[str, Any]) -> Err[ServiceError] | None:
        if "title" in fields and not (fields["title"] or "").strip():
            return invalid(_("Title is required"), "title")
        if "status" in fields and (error := _check_status(fields["status"])):
            return error
        if fields.get("template") and not template_exists(fields["template"]):
            return invalid(_("Unknown template"), "template")
        return None

    @staticmethod
    def _clear_other_homepages(page: Page) -> None:
        cleared = Page.objects.filter(is_homepage=True).exclude(pk=page.pk).update(is_homepage=False)
        if cleared:
            logger.info(f"🏠 [Pages] {page.slug} is the new homepage")

    @classmethod
    @atomic_with_retry()
    @audit_service_call("page_create")
    def create(cls, request: PageCreationRequest, author: User | None = None) -> Result[Page, ServiceError]:
        if error := cls._validate({"title": request.title, "status": request.status, "template": request.template}):
            return error
        if request.parent_id and not Page.objects.filter(pk=request.parent_id).exists():
            return invalid(_("Parent page does not exist"), "parentId")

        page = Page.objects.create(
            title=request.title.strip(),
            slug=request.slug,
            content=request.content or "",
            status=request.status,
            template=request.template or DEFAULT_TEMPLATE,
            parent_id=request.parent_id,
            sort_order=request.sort_order,
            use_page_builder=request.use_page_builder,
            is_homepage=request.is_homepage,
            allowed_section_types=list(request.allowed_section_types),
            author=author,
        )
        if page.is_homepage:
            cls._clear_other_homepages(page)

        logger.info(f"✅ [Pages] Created page {page.slug}")
        return Ok(page)

    @classmethod
    @atomic_with_retry()
    @audit_service_call("page_update")
    def update(cls, page: Page, **fields: Any) -> Result[Page, ServiceError]:
        if "template" in fields and not (fields["template"] or "").strip():
            fields["template"] = DEFAULT_TEMPLATE
        if error := cls._validate(fields):
            return error

        if "parent_id" in fields:
            parent_id = fields["parent_id"] or None
            if parent_id is not None:
                if parent_id == page.pk:
                    return invalid(_("A page cannot be its own parent"), "parentId")
                if not Page.objects.filter(pk=parent_id).exists():
                    return invalid(_("Parent page does not exist"), "parentId")
                if page_tree.is_descendant_of(parent_id, page.pk, list(Page.objects.all())):
                    return invalid(_("A page cannot be moved under its own descendant"), "parentId")
            page.parent_id = parent_id

        for name in cls.EDITABLE_FIELDS:
            if name in fields:
                setattr(page, name, fields[name])
        if fields.get("slug"):
            page.slug = unique_slug(Page, fields["slug"], instance_pk=page.pk)
        page.save()

        if page.is_homepage:
            cls._clear_other_homepages(page)

        logger.info(f"✅ [Pages] Updated page {page.slug}")
        return Ok(page)

    @staticmethod
    @atomic_with_retry()
    @audit_service_call("page_delete")
    def delete(page: Page) -> Result[int, ServiceError]:
        """Delete a page; its children move up to the page's parent"""
        page_id = page.pk
        moved = Page.objects.filter(parent_id=page_id).update(parent_id=page.parent_id)
        page.delete()
        logger.warning(f"🗑️ [Pages] Deleted page {page_id}, re-parented {moved} children")
        return Ok(page_id)
