"""
Institution templates for the Municipal CMS Platform

An institution template seeds a fresh installation: theme colors and font,
the homepage sections created by the setup wizard and the section types the
page builder offers afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final

from apps.content.section_configs import SECTION_TYPES

MUSEUM: Final[str] = "museum"
MUNICIPALITY: Final[str] = "municipality"
SCHOOL: Final[str] = "school"
CULTURAL_CENTER: Final[str] = "cultural_center"
HOSPITAL: Final[str] = "hospital"
LIBRARY: Final[str] = "library"


@dataclass(frozen=True)
class PredefinedSection:
    type: str
    name: str
    data: dict[str, Any]
    sort_order: int
    is_visible: bool = True
    is_locked: bool = False
    is_required: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "name": self.name,
            "data": dict(self.data),
            "sortOrder": self.sort_order,
            "isVisible": self.is_visible,
            "isLocked": self.is_locked,
            "isRequired": self.is_required,
        }


@dataclass(frozen=True)
class InstitutionTemplate:
    type: str
    name: str
    description: str
    primary_color: str
    secondary_color: str
    font_family: str
    predefined_sections: tuple[PredefinedSection, ...] = ()
    allowed_section_types: tuple[str, ...] = field(default=SECTION_TYPES)

    @property
    def homepage_section_types(self) -> list[str]:
        """Types the seeded homepage accepts: predefined ones plus the extra allowed types"""
        types = [section.type for section in self.predefined_sections]
        types.extend(t for t in self.allowed_section_types if t not in types)
        return types

    def as_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "name": self.name,
            "description": self.description,
            "primaryColor": self.primary_color,
            "secondaryColor": self.secondary_color,
            "fontFamily": self.font_family,
            "predefinedSections": [section.as_dict() for section in self.predefined_sections],
            "allowedSectionTypes": list(self.allowed_section_types),
        }


# ===============================================================================
# MUSEUM
# ===============================================================================

_MUSEUM_SECTIONS: Final[tuple[PredefinedSection, ...]] = (
    PredefinedSection(
        type="hero_image",
        name="Главни банер",
        sort_order=0,
        is_locked=True,
        is_required=True,
        data={
            "title": "Добродошли у наш музеј",
            "subtitle": "Откријте богату историју и културно наслеђе",
            "description": "Истражите наше збирке и изложбе које говоре о прошлости, садашњости и будућности.",
            "buttonText": "Планирајте посету",
            "buttonLink": "/info-za-posetioce",
            "buttonStyle": "primary",
            "backgroundImage": "/images/museum-hero.jpg",
            "height": "75%",
            "layout": "full-width",
            "textColor": "#FFFFFF",
        },
    ),
    PredefinedSection(
        type="card_top",
        name="Тренутне изложбе",
        sort_order=1,
        data={
            "title": "Тренутне изложбе",
            "subtitle": "Откријте наше најновије збирке",
            "description": (
                "Проширите своје знање кроз наше пажљиво одабране изложбе "
                "које покривају различите периоде и теме."
            ),
            "layout": "contained",
            "cards": [
                {
                    "title": "Археолошка збирка",
                    "description": "Артефакти из античког периода који откривају живот наших предака.",
                    "image": "/images/archaeology-exhibit.jpg",
                    "link": "/izlozbe/arheoloska-zbirka",
                },
                {
                    "title": "Уметничка галерија",
                    "description": "Ремек-дела локалних и међународних уметника кроз векове.",
                    "image": "/images/art-gallery.jpg",
                    "link": "/izlozbe/umetnicka-galerija",
                },
                {
                    "title": "Историјска поставка",
                    "description": "Хронолошки приказ кључних догађаја и личности из наше историје.",
                    "image": "/images/history-exhibit.jpg",
                    "link": "/izlozbe/istorijska-postavka",
                },
            ],
        },
    ),
    PredefinedSection(
        type="cta_one",
        name="Позив за посету",
        sort_order=2,
        data={
            "title": "Планирајте своју посету",
            "description": (
                "Резервишите карте унапред и обезбедите најбоље искуство у музеју. "
                "Доступне су групне посете и едукативни програми."
            ),
            "buttonText": "Резервиши карте",
            "buttonLink": "/karte",
            "buttonStyle": "primary",
            "backgroundColor": "#8B4513",
            "layout": "contained",
        },
    ),
    PredefinedSection(
        type="card_left",
        name="Услуге музеја",
        sort_order=3,
        data={
            "title": "Наше услуге",
            "subtitle": "Више од обичне посете",
            "description": "Понудимо разноврсне услуге које чине ваше искуство незаборавним.",
            "layout": "contained",
            "cards": [
                {
                    "title": "Водичке туре",
                    "description": (
                        "Стручни водичи ће вас провести кроз најзанимљивије делове музеја са детаљним објашњењима."
                    ),
                    "image": "/images/guided-tours.jpg",
                    "link": "/usluge/vodicke-ture",
                },
                {
                    "title": "Едукативни програми",
                    "description": "Специјални програми за школске групе, студенте и одрасле посетиоце.",
                    "image": "/images/education.jpg",
                    "link": "/usluge/edukativni-programi",
                },
                {
                    "title": "Истраживачки центар",
                    "description": "Приступ архивама и збиркама за истраживаче и научне раднике.",
                    "image": "/images/research.jpg",
                    "link": "/usluge/istrazivacki-centar",
                },
            ],
        },
    ),
    PredefinedSection(
        type="logos_one",
        name="Партнери",
        sort_order=4,
        data={
            "title": "Наши партнери",
            "description": "Сарађујемо са водећим културним институцијама и организацијама.",
            "layout": "contained",
            "logos": [
                {"name": "Министарство културе", "image": "/images/ministry-culture.png", "link": "https://kultura.gov.rs"},
                {"name": "Народна библиотека Србије", "image": "/images/national-library.png", "link": "https://nb.rs"},
                {"name": "Универзитет у Београду", "image": "/images/university-belgrade.png", "link": "https://bg.ac.rs"},
            ],
        },
    ),
    PredefinedSection(
        type="contact_two",
        name="Контакт и локација",
        sort_order=5,
        data={
            "title": "Посетите нас",
            "description": "Лако нас пронађите и планирајте своју посету",
            "layout": "contained",
            "contactInfo": {
                "address": "Музејска улица 1, 11000 Београд",
                "phone": "+381 11 123 4567",
                "email": "info@muzej.rs",
                "workingHours": "Уторак - Недеља: 10:00 - 18:00\nПонедељак: Затворено",
                "mapUrl": "https://www.google.com/maps/embed",
            },
        },
    ),
)

# ===============================================================================
# REGISTRY
# ===============================================================================

INSTITUTION_TEMPLATES: Final[dict[str, InstitutionTemplate]] = {
    template.type: template
    for template in (
        InstitutionTemplate(
            type=MUSEUM,
            name="Музеј",
            description="Темплејт за музеје, галерије и културне институције",
            primary_color="#8B4513",
            secondary_color="#DAA520",
            font_family="Playfair Display",
            predefined_sections=_MUSEUM_SECTIONS,
            allowed_section_types=(
                "hero_stack",
                "hero_left",
                "hero_video",
                "card_bottom",
                "card_right",
                "team_one",
                "custom_html",
                "contact_one",
            ),
        ),
        InstitutionTemplate(
            type=MUNICIPALITY,
            name="Општина/Град",
            description="Темплејт за општине, градове и локалне самоуправе",
            primary_color="#003366",
            secondary_color="#0066CC",
            font_family="Inter",
        ),
        InstitutionTemplate(
            type=SCHOOL,
            name="Школа/Универзитет",
            description="Темплејт за образовне институције",
            primary_color="#1E3A8A",
            secondary_color="#3B82F6",
            font_family="Open Sans",
        ),
        InstitutionTemplate(
            type=CULTURAL_CENTER,
            name="Културни центар",
            description="Темплејт за културне центре и установе",
            primary_color="#7C2D92",
            secondary_color="#A855F7",
            font_family="Poppins",
        ),
        InstitutionTemplate(
            type=HOSPITAL,
            name="Болница/Клиника",
            description="Темплејт за здравствене установе",
            primary_color="#DC2626",
            secondary_color="#EF4444",
            font_family="Roboto",
        ),
        InstitutionTemplate(
            type=LIBRARY,
            name="Библиотека",
            description="Темплејт за библиотеке и информационе центре",
            primary_color="#059669",
            secondary_color="#10B981",
            font_family="Lora",
        ),
    )
}

DEFAULT_INSTITUTION_TYPE: Final[str] = MUNICIPALITY


def get_institution_template(institution_type: str) -> InstitutionTemplate | None:
    return INSTITUTION_TEMPLATES.get(institution_type)


def get_all_institution_types() -> list[dict[str, str]]:
    """``[{value, label, description}]`` for the setup wizard picker"""
    return [
        {"value": template.type, "label": template.name, "description": template.description}
        for template in INSTITUTION_TEMPLATES.values()
    ]
