"""
Shared helpers for the Municipal CMS Platform
Slugs, key casing and HTML stripping.
"""

from __future__ import annotations

import re
from typing import Any

from django.db.models import Model
from django.utils.html import strip_tags

from apps.common.transliteration import slugify_text

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")
_WHITESPACE = re.compile(r"\s+")


def snake_to_camel(key: str) -> str:
    """``site_name`` -> ``siteName``; already camelCase keys pass through"""
    head, *rest = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def camel_to_snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def strip_html(html: str | None) -> str:
    """Plain text from rich-text content, whitespace collapsed"""
    if not html:
        return ""
    return _WHITESPACE.sub(" ", strip_tags(html)).strip()


def unique_slug(
    model: type[Model],
    source: str,
    *,
    instance_pk: Any = None,
    field: str = "slug",
    max_length: int = 255,
) -> str:
    """
    Slug for ``source`` that is unique for ``model.field``.

    Collisions get ``-2``, ``-3`` ... appended. ``instance_pk`` excludes the
    row being updated so re-saving keeps its own slug.
    """
    base = slugify_text(source, max_length=max_length) or model._meta.model_name or "item"
    queryset = model._default_manager.all()
    if instance_pk is not None:
        queryset = queryset.exclude(pk=instance_pk)

    candidate = base
    counter = 2
    while queryset.filter(**{field: candidate}).exists():
        suffix = f"-{counter}"
        candidate = f"{base[: max_length - len(suffix)]}{suffix}"
        counter += 1
    return candidate
