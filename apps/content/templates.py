"""
Page template registry for the Municipal CMS Platform

The public frontend renders a page with the component registered under
its ``template`` key; the backend owns the list of valid keys and the
metadata the dashboard shows in the template picker.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Final

DEFAULT_TEMPLATE: Final[str] = "default"


@dataclass(frozen=True)
class TemplateMetadata:
    key: str
    name: str
    description: str
    category: str
    features: tuple[str, ...]

    def as_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["features"] = list(self.features)
        return data


TEMPLATE_METADATA: Final[dict[str, TemplateMetadata]] = {
    template.key: template
    for template in (
        TemplateMetadata(
            "about",
            "О институцији",
            "Шаблон за представљање институције са статистикама и основним информацијама",
            "institutional",
            ("Херо секција", "Статистике", "Објаве", "Респонзиван дизајн"),
        ),
        TemplateMetadata(
            "contact",
            "Контакт",
            "Контакт страница са формом за слање поруке и основним информацијама",
            "service",
            ("Контакт форма", "Контакт информације", "Валидација", "Email интеграција"),
        ),
        TemplateMetadata(
            "services",
            "Услуге",
            "Приказ услуга које пружа институција",
            "service",
            ("Листа услуга", "Објаве", "Прегледан распоред"),
        ),
        TemplateMetadata(
            "transparency",
            "Транспарентност",
            "Страница за приступ информацијама од јавног значаја",
            "information",
            ("Документи", "Објаве", "Јавне набавке", "Буџет"),
        ),
        TemplateMetadata(
            "default",
            "Основни",
            "Основни шаблон за стандардне странице",
            "information",
            ("Флексибилан садржај", "Објаве", "Минималан дизајн"),
        ),
        TemplateMetadata(
            "categories",
            "Категорије",
            "Преглед свих категорија објава",
            "information",
            ("Листа категорија", "Број објава"),
        ),
        TemplateMetadata(
            "posts",
            "Објаве",
            "Архива свих објављених вести",
            "information",
            ("Листа објава", "Пагинација", "Претрага"),
        ),
        TemplateMetadata(
            "gallery",
            "Галерија",
            "Преглед објављених галерија слика",
            "information",
            ("Галерије", "Лајтбокс", "Филтер по типу"),
        ),
        TemplateMetadata(
            "directors",
            "Руководство",
            "Тренутни и бивши директори са документима",
            "institutional",
            ("Тренутни директор", "Биографија", "Документи"),
        ),
        TemplateMetadata(
            "organizational-structure",
            "Организациона структура",
            "Хијерархијски приказ организационих јединица",
            "institutional",
            ("Стабло јединица", "Контакт подаци", "Руководиоци"),
        ),
        TemplateMetadata(
            "documentation",
            "Документација",
            "Јавни документи из медијске библиотеке по категоријама",
            "information",
            ("Категорије докумената", "Преузимање", "Претрага"),
        ),
    )
}


def template_exists(template_key: str) -> bool:
    return template_key in TEMPLATE_METADATA


def get_all_templates() -> list[dict[str, Any]]:
    return [template.as_dict() for template in TEMPLATE_METADATA.values()]


def get_templates_by_category(category: str) -> list[dict[str, Any]]:
    return [template.as_dict() for template in TEMPLATE_METADATA.values() if template.category == category]
