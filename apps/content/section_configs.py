"""
Page builder section registry for the Municipal CMS Platform

Each section type declares the fields the dashboard editor renders and
the fields a section must carry before it can be saved. Validation and
default skeletons are derived from the same declarations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final

from django.core.exceptions import ValidationError
from django.core.validators import validate_email

# ===============================================================================
# FIELD DECLARATIONS
# ===============================================================================

@dataclass(frozen=True)
class FieldConfig:
    key: str
    label: str
    type: str = "text"
    required: bool = False
    placeholder: str = ""
    rows: int | None = None
    options: tuple[tuple[str, str], ...] = ()
    # Item schema for arrays, property schema for objects
    fields: tuple[FieldConfig, ...] = ()

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"key": self.key, "label": self.label, "type": self.type, "required": self.required}
        if self.placeholder:
            data["placeholder"] = self.placeholder
        if self.rows:
            data["rows"] = self.rows
        if self.options:
            data["options"] = [{"value": value, "label": label} for value, label in self.options]
        if self.fields:
            data["fields"] = [nested.as_dict() for nested in self.fields]
        return data


@dataclass(frozen=True)
class SectionTypeConfig:
    type: str
    name: str
    description: str
    required: tuple[str, ...]
    fields: tuple[FieldConfig, ...] = field(default_factory=tuple)

    def as_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "name": self.name,
            "description": self.description,
            "required": list(self.required),
            "fields": [f.as_dict() for f in self.fields],
        }


BUTTON_STYLES: Final[tuple[tuple[str, str], ...]] = (
    ("primary", "Главни"),
    ("secondary", "Секундарни"),
    ("outline", "Обруб"),
)

_TITLE = FieldConfig("title", "Наслов", placeholder="Главни наслов")
_SECTION_TITLE = FieldConfig("title", "Наслов секције")
_SUBTITLE = FieldConfig("subtitle", "Поднаслов")
_BUTTON_TEXT = FieldConfig("buttonText", "Текст дугмета", placeholder="Сазнај више")
_BUTTON_LINK = FieldConfig("buttonLink", "Линк дугмета", placeholder="/o-nama")
_BUTTON_STYLE = FieldConfig("buttonStyle", "Стил дугмета", "select", options=BUTTON_STYLES)


def _description(rows: int, label: str = "Опис") -> FieldConfig:
    return FieldConfig("description", label, "textarea", rows=rows)


_CARDS = FieldConfig(
    "cards",
    "Картице",
    "array",
    fields=(
        FieldConfig("title", "Наслов картице", required=True),
        FieldConfig("description", "Опис картице", "textarea", required=True, rows=3),
        FieldConfig("image", "Слика картице", "image"),
        FieldConfig("link", "Линк картице", placeholder="/stranica"),
    ),
)

_CONTACT_INFO = FieldConfig(
    "contactInfo",
    "Контакт информације",
    "object",
    fields=(
        FieldConfig("address", "Адреса"),
        FieldConfig("phone", "Телефон"),
        FieldConfig("email", "Е-пошта", "email"),
        FieldConfig("workingHours", "Радно време"),
        FieldConfig("mapUrl", "URL мапе"),
    ),
)

_HERO_FIELDS = (
    _TITLE,
    _SUBTITLE,
    _description(4),
    _BUTTON_TEXT,
    _BUTTON_LINK,
    _BUTTON_STYLE,
    FieldConfig("image", "Слика", "image"),
)

_CARD_FIELDS = (_SECTION_TITLE, _SUBTITLE, _description(3, "Опис секције"), _CARDS)


def _card_section(section_type: str, name: str, description: str) -> SectionTypeConfig:
    return SectionTypeConfig(section_type, name, description, ("title",), _CARD_FIELDS)


# ===============================================================================
# SECTION REGISTRY
# ===============================================================================

SECTION_CONFIGS: Final[dict[str, SectionTypeConfig]] = {
    config.type: config
    for config in (
        SectionTypeConfig(
            "hero_stack", "Херо (центрирано)", "Наслов и дугме центрирани изнад слике", ("title",), _HERO_FIELDS
        ),
        SectionTypeConfig("hero_left", "Херо (лево)", "Текст лево, слика десно", ("title",), _HERO_FIELDS),
        SectionTypeConfig(
            "hero_image",
            "Херо са позадинском сликом",
            "Наслов преко пуне позадинске слике",
            ("title", "backgroundImage"),
            (
                _TITLE,
                _SUBTITLE,
                _description(3),
                FieldConfig("backgroundImage", "Позадинска слика", "image"),
                _BUTTON_TEXT,
                _BUTTON_LINK,
                _BUTTON_STYLE,
            ),
        ),
        SectionTypeConfig(
            "hero_video",
            "Херо са видеом",
            "Наслов уз уграђени видео",
            ("title", "videoUrl"),
            (
                _TITLE,
                _SUBTITLE,
                _description(3),
                FieldConfig("videoUrl", "URL видеа", placeholder="https://youtube.com/watch?v=..."),
                FieldConfig("buttonText", "Текст дугмета"),
                FieldConfig("buttonLink", "Линк дугмета"),
            ),
        ),
        _card_section("card_top", "Картице (слика горе)", "Мрежа картица са сликом изнад текста"),
        _card_section("card_bottom", "Картице (слика доле)", "Мрежа картица са сликом испод текста"),
        _card_section("card_left", "Картице (слика лево)", "Листа картица са сликом лево"),
        _card_section("card_right", "Картице (слика десно)", "Листа картица са сликом десно"),
        SectionTypeConfig(
            "contact_one",
            "Контакт са формом",
            "Контакт форма и контакт информације",
            ("title",),
            (
                FieldConfig("title", "Наслов контакт форме"),
                FieldConfig("subtitle", "Наслов контакт информација"),
                _description(3),
                _CONTACT_INFO,
            ),
        ),
        SectionTypeConfig(
            "contact_two",
            "Контакт информације",
            "Контакт информације са мапом",
            ("title",),
            (FieldConfig("title", "Наслов"), _description(3), _CONTACT_INFO),
        ),
        SectionTypeConfig(
            "cta_one",
            "Позив на акцију",
            "Истакнута порука са дугметом",
            ("title", "buttonText", "buttonLink"),
            (
                FieldConfig("title", "Наслов"),
                _description(3),
                FieldConfig("buttonText", "Текст дугмета", placeholder="Контактирајте нас"),
                FieldConfig("buttonLink", "Линк дугмета", placeholder="/kontakt"),
                _BUTTON_STYLE,
                FieldConfig("backgroundColor", "Боја позадине", placeholder="#f3f4f6"),
            ),
        ),
        SectionTypeConfig(
            "logos_one",
            "Логотипи партнера",
            "Низ логотипа партнерских организација",
            ("title",),
            (
                _SECTION_TITLE,
                _description(2, "Опис секције"),
                FieldConfig(
                    "logos",
                    "Логотипи",
                    "array",
                    fields=(
                        FieldConfig("name", "Назив организације", required=True),
                        FieldConfig("image", "Лого", "image", required=True),
                        FieldConfig("link", "Веб сајт"),
                    ),
                ),
            ),
        ),
        SectionTypeConfig(
            "team_one",
            "Тим",
            "Чланови тима са фотографијама",
            ("title",),
            (
                _SECTION_TITLE,
                _description(3, "Опис секције"),
                FieldConfig(
                    "teamMembers",
                    "Чланови тима",
                    "array",
                    fields=(
                        FieldConfig("name", "Име и презиме", required=True),
                        FieldConfig("position", "Позиција", required=True),
                        FieldConfig("image", "Фотографија", "image"),
                        FieldConfig("bio", "Биографија", "textarea", rows=3),
                    ),
                ),
            ),
        ),
        SectionTypeConfig(
            "custom_html",
            "Прилагођени HTML",
            "Слободан HTML садржај",
            ("htmlContent",),
            (FieldConfig("htmlContent", "HTML садржај", "code", rows=10),),
        ),
    )
}

SECTION_TYPES: Final[tuple[str, ...]] = tuple(SECTION_CONFIGS)


# ===============================================================================
# VALIDATION & DEFAULTS
# ===============================================================================


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _validate_field(config: FieldConfig, value: Any, path: str) -> list[str]:
    """Type-specific checks for a present value"""
    errors: list[str] = []

    if config.type in ("select", "email") and not isinstance(value, str):
        return [f"{path}: must be a string"]

    if config.type == "select" and config.options and value not in {v for v, _label in config.options}:
        errors.append(f"{path}: invalid option '{value}'")

    elif config.type == "email" and not _is_blank(value):
        try:
            validate_email(value)
        except ValidationError:
            errors.append(f"{path}: invalid email address")

    elif config.type == "array":
        if not isinstance(value, list):
            return [f"{path}: must be a list"]
        for index, item in enumerate(value):
            if not isinstance(item, dict):
                errors.append(f"{path}[{index}]: must be an object")
                continue
            errors.extend(_validate_fields(config.fields, item, f"{path}[{index}]"))

    elif config.type == "object":
        if not isinstance(value, dict):
            return [f"{path}: must be an object"]
        errors.extend(_validate_fields(config.fields, value, path))

    return errors


def _validate_fields(fields: tuple[FieldConfig, ...], data: dict[str, Any], prefix: str = "") -> list[str]:
    errors: list[str] = []
    for config in fields:
        path = f"{prefix}.{config.key}" if prefix else config.key
        value = data.get(config.key)
        if _is_blank(value):
            if config.required:
                errors.append(f"{path}: field is required")
            continue
        errors.extend(_validate_field(config, value, path))
    return errors


def validate_section_data(section_type: str, data: dict[str, Any] | None) -> list[str]:
    """
    Validate section content against its type declaration.

    Returns a list of human-readable errors; an empty list means valid.
    Keys the declaration does not know are kept as-is.
    """
    config = SECTION_CONFIGS.get(section_type)
    if config is None:
        return [f"Unknown section type: {section_type}"]
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return ["Section data must be an object"]

    errors = [f"{key}: field is required" for key in config.required if _is_blank(data.get(key))]
    for field_config in config.fields:
        value = data.get(field_config.key)
        if not _is_blank(value):
            errors.extend(_validate_field(field_config, value, field_config.key))
    return errors


def _default_for(config: FieldConfig) -> Any:
    if config.type == "array":
        return []
    if config.type == "object":
        return {nested.key: _default_for(nested) for nested in config.fields}
    if config.type == "select" and config.options:
        return config.options[0][0]
    return ""


def get_default_data(section_type: str) -> dict[str, Any]:
    """Skeleton data for a freshly added section"""
    config = SECTION_CONFIGS.get(section_type)
    if config is None:
        return {}
    return {field_config.key: _default_for(field_config) for field_config in config.fields}
