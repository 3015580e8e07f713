"""
Content models for the Municipal CMS Platform
Categories, news posts, pages and page builder sections.
"""

from __future__ import annotations

from typing import Any, ClassVar

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.common.constants import EXCERPT_MAX_LENGTH, SLUG_MAX_LENGTH, TITLE_MAX_LENGTH
from apps.common.utils import unique_slug

from .section_configs import SECTION_TYPES
from .templates import DEFAULT_TEMPLATE, TEMPLATE_METADATA

STATUS_DRAFT = "draft"
STATUS_PUBLISHED = "published"

STATUS_CHOICES: tuple[tuple[str, str], ...] = (
    (STATUS_DRAFT, _("Draft")),
    (STATUS_PUBLISHED, _("Published")),
)


class SlugMixin(models.Model):
    """Fills ``slug`` from ``slug_source`` when blank and keeps it unique"""

    slug_source: ClassVar[str] = "title"

    class Meta:
        abstract = True

    def save(self, *args: Any, **kwargs: Any) -> None:
        source = self.slug or getattr(self, self.slug_source)
        self.slug = unique_slug(type(self), source, instance_pk=self.pk, max_length=SLUG_MAX_LENGTH)
        super().save(*args, **kwargs)


# ===============================================================================
# CATEGORY
# ===============================================================================


class Category(SlugMixin):
    """📂 Post category"""

    slug_source: ClassVar[str] = "name"

    name = models.CharField(_("name"), max_length=100)
    slug = models.SlugField(_("slug"), max_length=SLUG_MAX_LENGTH, unique=True, blank=True, allow_unicode=False)
    description = models.TextField(_("description"), blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "categories"
        verbose_name = _("Category")
        verbose_name_plural = _("Categories")
        ordering: ClassVar[tuple[str, ...]] = ("name",)

    def __str__(self) -> str:
        return f"📂 {self.name}"


# ===============================================================================
# PAGE
# ===============================================================================


class Page(SlugMixin):
    """
    📄 Static page.

    Pages form a tree through ``parent``. With ``use_page_builder`` the
    public site renders the page's sections instead of ``content``.
    """

    TEMPLATE_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = tuple(
        (key, meta.name) for key, meta in TEMPLATE_METADATA.items()
    )

    title = models.CharField(_("title"), max_length=TITLE_MAX_LENGTH)
    slug = models.SlugField(_("slug"), max_length=SLUG_MAX_LENGTH, unique=True, blank=True)
    content = models.TextField(_("content"), blank=True)
    status = models.CharField(_("status"), max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    template = models.CharField(_("template"), max_length=50, choices=TEMPLATE_CHOICES, default=DEFAULT_TEMPLATE)
    sort_order = models.PositiveIntegerField(_("sort order"), default=0)
    parent = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="children",
        verbose_name=_("parent page"),
    )
    use_page_builder = models.BooleanField(_("use page builder"), default=False)
    is_homepage = models.BooleanField(_("homepage"), default=False)
    allowed_section_types = models.JSONField(
        _("allowed section types"),
        default=list,
        blank=True,
        help_text=_("Section types the page builder may add; empty allows all"),
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="pages",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "pages"
        verbose_name = _("Page")
        verbose_name_plural = _("Pages")
        ordering: ClassVar[tuple[str, ...]] = ("sort_order", "title")
        indexes: ClassVar[tuple[models.Index, ...]] = (
            models.Index(fields=["status"]),
            models.Index(fields=["parent", "sort_order"]),
        )

    def __str__(self) -> str:
        return f"📄 {self.title}"

    @property
    def is_published(self) -> bool:
        return self.status == STATUS_PUBLISHED


# ===============================================================================
# POST
# ===============================================================================


class Post(SlugMixin):
    """📰 News post"""

    title = models.CharField(_("title"), max_length=TITLE_MAX_LENGTH)
    slug = models.SlugField(_("slug"), max_length=SLUG_MAX_LENGTH, unique=True, blank=True)
    excerpt = models.TextField(_("excerpt"), max_length=EXCERPT_MAX_LENGTH, blank=True)
    content = models.TextField(_("content"), blank=True)
    status = models.CharField(_("status"), max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    featured_image = models.CharField(_("featured image"), max_length=500, blank=True)
    view_count = models.PositiveIntegerField(_("views"), default=0)
    published_at = models.DateTimeField(_("published at"), null=True, blank=True)

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="posts",
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="posts",
    )
    pages = models.ManyToManyField(Page, blank=True, related_name="posts", help_text=_("Pages listing this post"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "posts"
        verbose_name = _("Post")
        verbose_name_plural = _("Posts")
        ordering: ClassVar[tuple[str, ...]] = ("-created_at",)
        indexes: ClassVar[tuple[models.Index, ...]] = (
            models.Index(fields=["status", "-published_at"]),
            models.Index(fields=["category", "status"]),
        )

    def __str__(self) -> str:
        return f"📰 {self.title}"

    def save(self, *args: Any, **kwargs: Any) -> None:
        if self.status == STATUS_PUBLISHED and self.published_at is None:
            self.published_at = timezone.now()
        super().save(*args, **kwargs)

    @property
    def is_published(self) -> bool:
        return self.status == STATUS_PUBLISHED


# ===============================================================================
# PAGE BUILDER
# ===============================================================================


class PageSection(models.Model):
    """🧱 Typed content block on a page builder page"""

    TYPE_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = tuple((t, t) for t in SECTION_TYPES)

    page = models.ForeignKey(Page, on_delete=models.CASCADE, related_name="sections")
    type = models.CharField(_("type"), max_length=50, choices=TYPE_CHOICES)
    name = models.CharField(_("name"), max_length=200)
    data = models.JSONField(_("data"), default=dict, blank=True)
    sort_order = models.PositiveIntegerField(_("sort order"), default=0)
    is_visible = models.BooleanField(_("visible"), default=True)
    is_locked = models.BooleanField(_("locked"), default=False, help_text=_("Only the content can be edited"))
    is_required = models.BooleanField(_("required"), default=False, help_text=_("Cannot be hidden or deleted"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "page_sections"
        verbose_name = _("Page section")
        verbose_name_plural = _("Page sections")
        ordering: ClassVar[tuple[str, ...]] = ("page", "sort_order", "id")

    def __str__(self) -> str:
        return f"🧱 {self.name} ({self.type})"
