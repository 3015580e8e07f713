"""
Script-insensitive site search for the Municipal CMS Platform

Published posts and pages are matched in Python with ``enhanced_search``
so a query typed in Latin finds Cyrillic content and the other way round.
"""

from __future__ import annotations

import logging
from typing import Any

from django.conf import settings

from apps.common.transliteration import enhanced_search, highlight_patterns
from apps.common.utils import strip_html

from .models import STATUS_PUBLISHED, Page, Post

logger = logging.getLogger(__name__)


class SearchService:
    """🔎 Site search over published posts and pages"""

    @staticmethod
    def _post_matches(post: Post, query: str) -> bool:
        fields = (post.title, post.excerpt, strip_html(post.content), post.category.name if post.category else "")
        return any(enhanced_search(value, query) for value in fields)

    @staticmethod
    def _page_matches(page: Page, query: str) -> bool:
        return enhanced_search(page.title, query) or enhanced_search(strip_html(page.content), query)

    @classmethod
    def search(cls, query: str | None) -> dict[str, Any]:
        """
        Returns ``{query, posts, pages, total, highlight}``.

        Queries shorter than ``CMS_SEARCH_MIN_QUERY_LENGTH`` return empty results.
        """
        query = (query or "").strip()
        empty: dict[str, Any] = {"query": query, "posts": [], "pages": [], "total": 0, "highlight": []}
        if len(query) < settings.CMS_SEARCH_MIN_QUERY_LENGTH:
            return empty

        post_limit = settings.CMS_SEARCH_POST_LIMIT
        page_limit = settings.CMS_SEARCH_PAGE_LIMIT

        posts: list[Post] = []
        for post in Post.objects.filter(status=STATUS_PUBLISHED).select_related("category", "author").order_by(
            "-published_at", "-created_at"
        ):
            if cls._post_matches(post, query):
                posts.append(post)
                if len(posts) >= post_limit:
                    break

        pages: list[Page] = []
        for page in Page.objects.filter(status=STATUS_PUBLISHED).order_by("sort_order", "title"):
            if cls._page_matches(page, query):
                pages.append(page)
                if len(pages) >= page_limit:
                    break

        logger.debug(f"🔎 [Search] '{query}' matched {len(posts)} posts, {len(pages)} pages")
        return {
            "query": query,
            "posts": posts,
            "pages": pages,
            "total": len(posts) + len(pages),
            "highlight": highlight_patterns(query),
        }
