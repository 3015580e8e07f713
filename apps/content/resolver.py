"""
Public slug resolution for the Municipal CMS Platform

The public site has a single catch-all route; a slug may name a post,
a category, a page, a gallery or a citizen service.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from django.conf import settings
from django.utils.translation import gettext as _

from apps.common.types import Ok, Result, ServiceError, not_found
from apps.galleries.services import GalleryService
from apps.public_services.services import ServiceCatalogService

from .models import Page
from .page_builder import SectionService
from .services import CategoryService, PageService, PostService

logger = logging.getLogger(__name__)

RESOLVED_POST = "post"
RESOLVED_CATEGORY = "category"
RESOLVED_PAGE = "page"
RESOLVED_GALLERY = "gallery"
RESOLVED_SERVICE = "service"


@dataclass
class ResolvedContent:
    """What a slug resolved to; ``extra`` carries related collections"""

    type: str
    obj: Any
    extra: dict[str, Any] = field(default_factory=dict)


class PublicContentResolver:
    """🧭 Maps public slugs onto published content"""

    @classmethod
    def resolve(cls, slug: str) -> Result[ResolvedContent, ServiceError]:
        slug = (slug or "").strip().strip("/")
        if not slug:
            return not_found(_("Content not found"))

        post = PostService.get_by_slug(slug, published_only=True)
        if post.is_ok():
            return Ok(ResolvedContent(RESOLVED_POST, post.unwrap()))

        category = CategoryService.get_by_slug(slug)
        if category.is_ok():
            found = category.unwrap()
            posts = PostService.published().filter(category=found)
            return Ok(ResolvedContent(RESOLVED_CATEGORY, found, {"posts": list(posts)}))

        page = PageService.get_by_slug(slug, published_only=True)
        if page.is_ok():
            return Ok(ResolvedContent(RESOLVED_PAGE, page.unwrap(), cls.page_payload(page.unwrap())))

        gallery = GalleryService.get_by_slug(slug, published_only=True)
        if gallery.is_ok():
            return Ok(ResolvedContent(RESOLVED_GALLERY, gallery.unwrap()))

        service = ServiceCatalogService.get_by_slug(slug, public_only=True)
        if service.is_ok():
            return Ok(ResolvedContent(RESOLVED_SERVICE, service.unwrap()))

        logger.info(f"🔍 [Resolver] No content for slug '{slug}'")
        return not_found(_("Content not found"))

    @staticmethod
    def page_payload(page: Page) -> dict[str, Any]:
        """Collections a page template needs besides the page itself"""
        payload: dict[str, Any] = {
            "pagePosts": list(PostService.by_page(page.pk, limit=settings.CMS_PAGE_POSTS_LIMIT)),
        }
        if page.use_page_builder:
            payload["sections"] = list(SectionService.list(page, visible_only=True))
        if page.template == "categories":
            payload["categories"] = list(CategoryService.with_published_posts())
        elif page.template == "posts":
            payload["posts"] = list(PostService.published())
        return payload

    @classmethod
    def homepage(cls) -> dict[str, Any]:
        """Homepage page (if any) with its sections and the latest posts"""
        page = PageService.homepage()
        return {
            "page": page,
            "sections": list(SectionService.list(page, visible_only=True)) if page else [],
            "posts": list(PostService.homepage(settings.CMS_HOMEPAGE_POSTS_LIMIT)),
        }
