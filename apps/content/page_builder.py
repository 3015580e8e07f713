"""
Page builder services for the Municipal CMS Platform
Section CRUD, ordering, duplication and visibility.
"""

from __future__ import annotations

import logging
from typing import Any

from django.db.models import F, Max, QuerySet
from django.utils.translation import gettext as _

from apps.common.constants import SECTION_COPY_SUFFIX
from apps.common.security_decorators import atomic_with_retry, audit_service_call
from apps.common.types import Err, Ok, Result, ServiceError, SortOrderUpdate, forbidden, invalid

from .models import Page, PageSection
from .section_configs import SECTION_CONFIGS, get_default_data, validate_section_data

logger = logging.getLogger(__name__)


def _validation_error(errors: list[str]) -> Err[ServiceError]:
    return invalid(errors[0], "data", details={"errors": errors})


class SectionService:
    """🧱 Page builder sections"""

    # Locked sections only accept content changes
    LOCKED_EDITABLE_FIELDS = frozenset({"data"})
    EDITABLE_FIELDS = ("name", "data", "is_visible", "type")

    @staticmethod
    def list(page: Page, visible_only: bool = False) -> QuerySet[PageSection]:
        queryset = page.sections.all()
        if visible_only:
            queryset = queryset.filter(is_visible=True)
        return queryset.order_by("sort_order", "id")

    @staticmethod
    def _next_sort_order(page: Page) -> int:
        current = page.sections.aggregate(top=Max("sort_order"))["top"]
        return 0 if current is None else current + 1

    @classmethod
    @atomic_with_retry()
    @audit_service_call("page_section_create")
    def create(
        cls,
        page: Page,
        section_type: str,
        name: str = "",
        data: dict[str, Any] | None = None,
        is_visible: bool = True,
    ) -> Result[PageSection, ServiceError]:
        """Append a section at the end of the page"""
        config = SECTION_CONFIGS.get(section_type)
        if config is None:
            return invalid(_("Unknown section type: %(type)s") % {"type": section_type}, "type")
        if page.allowed_section_types and section_type not in page.allowed_section_types:
            return invalid(_("Section type %(type)s is not allowed on this page") % {"type": section_type}, "type")

        payload = data if data is not None else get_default_data(section_type)
        # Fresh skeletons are saved as-is; the editor fills required fields afterwards
        if data is not None and (errors := validate_section_data(section_type, payload)):
            return _validation_error(errors)

        section = PageSection.objects.create(
            page=page,
            type=section_type,
            name=(name or config.name).strip(),
            data=payload,
            sort_order=cls._next_sort_order(page),
            is_visible=is_visible,
        )
        if not page.use_page_builder:
            page.use_page_builder = True
            page.save(update_fields=["use_page_builder", "updated_at"])

        logger.info(f"✅ [Pages] Section {section.pk} ({section.type}) created on {page.slug}")
        return Ok(section)

    @classmethod
    @audit_service_call("page_section_update")
    def update(cls, section: PageSection, **fields: Any) -> Result[PageSection, ServiceError]:
        changes = {key: value for key, value in fields.items() if key in cls.EDITABLE_FIELDS}
        if section.is_locked and set(changes) - cls.LOCKED_EDITABLE_FIELDS:
            return forbidden(_("Locked sections only allow content changes"))
        if changes.get("is_visible") is False and section.is_required:
            return forbidden(_("Required sections cannot be hidden"))

        section_type = changes.get("type", section.type)
        if section_type not in SECTION_CONFIGS:
            return invalid(_("Unknown section type: %(type)s") % {"type": section_type}, "type")
        type_changed = section_type != section.type
        allowed = section.page.allowed_section_types
        if type_changed and allowed and section_type not in allowed:
            return invalid(_("Section type %(type)s is not allowed on this page") % {"type": section_type}, "type")
        if "data" in changes or type_changed:
            data = changes.get("data", section.data)
            if errors := validate_section_data(section_type, data or {}):
                return _validation_error(errors)

        for key, value in changes.items():
            setattr(section, key, value)
        section.save()
        logger.info(f"✅ [Pages] Section {section.pk} updated")
        return Ok(section)

    @staticmethod
    @audit_service_call("page_section_delete")
    def delete(section: PageSection) -> Result[int, ServiceError]:
        if section.is_required:
            return forbidden(_("Required sections cannot be deleted"))
        section_id = section.pk
        page = section.page
        section.delete()
        SectionService._renumber(page)
        logger.warning(f"🗑️ [Pages] Section {section_id} deleted from {page.slug}")
        return Ok(section_id)

    @staticmethod
    @atomic_with_retry()
    def duplicate(section: PageSection) -> Result[PageSection, ServiceError]:
        """Copy a section directly after the source; later sections shift down"""
        page = section.page
        page.sections.filter(sort_order__gt=section.sort_order).update(sort_order=F("sort_order") + 1)
        copy = PageSection.objects.create(
            page=page,
            type=section.type,
            name=f"{section.name}{SECTION_COPY_SUFFIX}",
            data=dict(section.data or {}),
            sort_order=section.sort_order + 1,
            is_visible=section.is_visible,
            is_locked=False,
            is_required=False,
        )
        logger.info(f"✅ [Pages] Section {section.pk} duplicated as {copy.pk}")
        return Ok(copy)

    @staticmethod
    def toggle_visibility(section: PageSection) -> Result[PageSection, ServiceError]:
        if section.is_visible and section.is_required:
            return forbidden(_("Required sections cannot be hidden"))
        section.is_visible = not section.is_visible
        section.save(update_fields=["is_visible", "updated_at"])
        return Ok(section)

    @staticmethod
    @atomic_with_retry()
    def reorder(page: Page, updates: list[SortOrderUpdate]) -> Result[list[PageSection], ServiceError]:
        """
        Apply ``[{id, sortOrder}]``. Every id must belong to the page; the
        result is renumbered densely (0..n-1) in the requested order, with
        sections missing from the request kept after the listed ones.
        """
        sections = {section.pk: section for section in page.sections.all()}
        try:
            requested = sorted(updates, key=lambda item: int(item["sortOrder"]))
            ordered_ids = [int(item["id"]) for item in requested]
        except (KeyError, TypeError, ValueError):
            return invalid(_("Each item needs id and sortOrder"))

        if len(set(ordered_ids)) != len(ordered_ids):
            return invalid(_("Duplicate section ids"))
        foreign = [section_id for section_id in ordered_ids if section_id not in sections]
        if foreign:
            return invalid(_("Sections do not belong to this page"), details={"ids": foreign})

        rest = sorted(
            (s for pk, s in sections.items() if pk not in set(ordered_ids)),
            key=lambda s: (s.sort_order, s.pk),
        )
        final = [sections[pk] for pk in ordered_ids] + rest
        for index, section in enumerate(final):
            section.sort_order = index
        PageSection.objects.bulk_update(final, ["sort_order"])

        logger.info(f"🔀 [Pages] Reordered {len(final)} sections on {page.slug}")
        return Ok(final)

    @staticmethod
    def _renumber(page: Page) -> None:
        sections = list(page.sections.order_by("sort_order", "id"))
        for index, section in enumerate(sections):
            section.sort_order = index
        PageSection.objects.bulk_update(sections, ["sort_order"])

    @classmethod
    @atomic_with_retry()
    def create_predefined(cls, page: Page, sections: list[dict[str, Any]]) -> list[PageSection]:
        """Seed sections from an institution template (setup wizard)"""
        created = PageSection.objects.bulk_create(
            [
                PageSection(
                    page=page,
                    type=item["type"],
                    name=item["name"],
                    data=dict(item.get("data") or {}),
                    sort_order=index,
                    is_visible=item.get("isVisible", True),
                    is_locked=item.get("isLocked", False),
                    is_required=item.get("isRequired", False),
                )
                for index, item in enumerate(sorted(sections, key=lambda s: s.get("sortOrder", 0)))
            ]
        )
        logger.info(f"✅ [Pages] Seeded {len(created)} sections on {page.slug}")
        return created
