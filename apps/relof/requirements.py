"""
Relof transparency index requirements for the Municipal CMS Platform

Each requirement inspects the live site data and reports how well one
publication obligation is met. Scores are derived from the results by
``apps.relof.services``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Final

from django.db.models import Count, Q
from django.utils import timezone

from apps.common.constants import RELOF_DOCUMENTS_FRESHNESS_DAYS, RELOF_POSTS_FRESHNESS_DAYS
from apps.content.models import STATUS_PUBLISHED, Page, Post
from apps.galleries.models import Gallery
from apps.media.models import Media
from apps.organization.models import Director, OrganizationalUnit
from apps.public_services.models import Service
from apps.settings.services import SettingsService

# ===============================================================================
# VOCABULARY
# ===============================================================================

STATUS_FULFILLED: Final[str] = "fulfilled"
STATUS_PARTIAL: Final[str] = "partial"
STATUS_MISSING: Final[str] = "missing"
STATUS_OUTDATED: Final[str] = "outdated"
STATUSES: Final[tuple[str, ...]] = (STATUS_FULFILLED, STATUS_PARTIAL, STATUS_MISSING, STATUS_OUTDATED)

PRIORITY_CRITICAL: Final[str] = "critical"
PRIORITY_HIGH: Final[str] = "high"
PRIORITY_MEDIUM: Final[str] = "medium"
PRIORITY_LOW: Final[str] = "low"
PRIORITIES: Final[tuple[str, ...]] = (PRIORITY_CRITICAL, PRIORITY_HIGH, PRIORITY_MEDIUM, PRIORITY_LOW)
PRIORITY_RANK: Final[dict[str, int]] = {priority: rank for rank, priority in enumerate(PRIORITIES)}


@dataclass(frozen=True)
class RelofCategory:
    key: str
    display_name: str
    weight: int


CATEGORIES: Final[dict[str, RelofCategory]] = {
    category.key: category
    for category in (
        RelofCategory("basic_info", "Основни подаци", 15),
        RelofCategory("contact_info", "Контакт информације", 15),
        RelofCategory("organizational_structure", "Организациона структура", 15),
        RelofCategory("services", "Услуге", 15),
        RelofCategory("documents", "Јавни документи", 20),
        RelofCategory("gallery", "Галерија", 5),
        RelofCategory("posts_activity", "Активност објављивања", 10),
        RelofCategory("social_media", "Друштвене мреже", 5),
    )
}


@dataclass
class Evaluation:
    """Outcome of one requirement check"""

    status: str
    issues: list[str] = field(default_factory=list)
    days_overdue: int | None = None


@dataclass(frozen=True)
class Requirement:
    key: str
    name: str
    description: str
    category: str
    priority: str
    points: int
    evaluator: Callable[[datetime], Evaluation]
    action_items: tuple[str, ...] = ()

    def evaluate(self, now: datetime | None = None) -> dict[str, Any]:
        """Run the check and return the serialized result with earned points"""
        now = now or timezone.now()
        outcome = self.evaluator(now)
        return {
            "id": self.key,
            "key": self.key,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "priority": self.priority,
            "points": self.points,
            "earnedPoints": earned_points(self.points, outcome.status),
            "status": outcome.status,
            "specificIssues": outcome.issues,
            "daysOverdue": outcome.days_overdue,
            "lastChecked": now.isoformat(),
        }


def earned_points(points: int, status: str) -> float:
    """Full points when fulfilled, half for partial or outdated, nothing when missing"""
    if status == STATUS_FULFILLED:
        return float(points)
    if status in (STATUS_PARTIAL, STATUS_OUTDATED):
        return points / 2
    return 0.0


# ===============================================================================
# EVALUATOR HELPERS
# ===============================================================================


def _setting_present(key: str) -> bool:
    value = SettingsService.get_value(key)
    return bool(str(value).strip()) if value is not None else False


def _setting_check(key: str, label: str) -> Callable[[datetime], Evaluation]:
    def check(now: datetime) -> Evaluation:
        if _setting_present(key):
            return Evaluation(STATUS_FULFILLED)
        return Evaluation(STATUS_MISSING, [f"Подешавање „{label}“ није попуњено"])

    return check


def _published_page_check(*templates: str) -> Callable[[datetime], Evaluation]:
    def check(now: datetime) -> Evaluation:
        pages = Page.objects.filter(template__in=templates)
        if pages.filter(status=STATUS_PUBLISHED).exists():
            return Evaluation(STATUS_FULFILLED)
        if pages.exists():
            return Evaluation(STATUS_PARTIAL, ["Страница постоји али није објављена"])
        return Evaluation(STATUS_MISSING, ["Не постоји страница са одговарајућим шаблоном"])

    return check


def _freshness(latest: datetime | None, now: datetime, max_age_days: int, subject: str) -> Evaluation:
    if latest is None:
        return Evaluation(STATUS_MISSING, [f"Нема објављених ставки: {subject}"])
    age_days = (now - latest).days
    if age_days > max_age_days:
        return Evaluation(
            STATUS_OUTDATED,
            [f"Последња ставка ({subject}) је стара {age_days} дана"],
            days_overdue=age_days - max_age_days,
        )
    return Evaluation(STATUS_FULFILLED)


# ===============================================================================
# EVALUATORS
# ===============================================================================


def _site_description(now: datetime) -> Evaluation:
    if _setting_present("siteDescription"):
        return Evaluation(STATUS_FULFILLED)
    if _setting_present("siteTagline"):
        return Evaluation(STATUS_PARTIAL, ["Постоји само слоган, недостаје опис сајта"])
    return Evaluation(STATUS_MISSING, ["Опис сајта није попуњен"])


def _organizational_units(now: datetime) -> Evaluation:
    units = OrganizationalUnit.objects.filter(is_active=True)
    if not units.exists():
        return Evaluation(STATUS_MISSING, ["Организационе јединице нису унете"])
    without_manager = list(units.filter(manager_name="").values_list("name", flat=True)[:5])
    if without_manager:
        return Evaluation(STATUS_PARTIAL, [f"Јединица „{name}“ нема руководиоца" for name in without_manager])
    return Evaluation(STATUS_FULFILLED)


def _current_director(now: datetime) -> Evaluation:
    director = Director.objects.filter(is_current=True, is_active=True).first()
    if director is None:
        return Evaluation(STATUS_MISSING, ["Тренутни директор није означен"])
    issues = []
    if not director.biography and not director.biography_file:
        issues.append("Недостаје биографија директора")
    if not director.profile_image:
        issues.append("Недостаје фотографија директора")
    return Evaluation(STATUS_PARTIAL if issues else STATUS_FULFILLED, issues)


def _director_documents(now: datetime) -> Evaluation:
    director = Director.objects.filter(is_current=True, is_active=True).first()
    if director is None:
        return Evaluation(STATUS_MISSING, ["Тренутни директор није означен"])
    if director.documents.filter(is_public=True).exists():
        return Evaluation(STATUS_FULFILLED)
    if director.documents.exists():
        return Evaluation(STATUS_PARTIAL, ["Документи директора нису јавни"])
    return Evaluation(STATUS_MISSING, ["Нема докумената о именовању директора"])


def _public_services(now: datetime) -> Evaluation:
    services = Service.objects.filter(is_active=True, is_public=True, status=Service.STATUS_ACTIVE)
    if not services.exists():
        return Evaluation(STATUS_MISSING, ["Нема објављених услуга за грађане"])
    without_documents = list(
        services.annotate(
            public_documents=Count("documents", filter=Q(documents__is_public=True, documents__is_active=True))
        )
        .filter(public_documents=0)
        .values_list("name", flat=True)[:5]
    )
    if without_documents:
        return Evaluation(STATUS_PARTIAL, [f"Услуга „{name}“ нема обрасце или упутства" for name in without_documents])
    return Evaluation(STATUS_FULFILLED)


def _service_contacts(now: datetime) -> Evaluation:
    services = Service.objects.filter(is_active=True, is_public=True, status=Service.STATUS_ACTIVE)
    if not services.exists():
        return Evaluation(STATUS_MISSING, ["Нема објављених услуга за грађане"])
    incomplete = list(services.filter(contact_email="", contact_phone="").values_list("name", flat=True)[:5])
    if incomplete:
        return Evaluation(STATUS_PARTIAL, [f"Услуга „{name}“ нема контакт податке" for name in incomplete])
    return Evaluation(STATUS_FULFILLED)


def _public_documents(now: datetime) -> Evaluation:
    documents = Media.objects.filter(is_public=True).exclude(mime_type__startswith="image/")
    if not documents.exists():
        return Evaluation(STATUS_MISSING, ["Нема јавно доступних докумената"])
    uncategorized = documents.filter(category=Media.CATEGORY_OTHER).count()
    if uncategorized == documents.count():
        return Evaluation(STATUS_PARTIAL, ["Документи нису разврстани по категоријама"])
    return Evaluation(STATUS_FULFILLED)


def _document_category_check(category: str, subject: str) -> Callable[[datetime], Evaluation]:
    def check(now: datetime) -> Evaluation:
        latest = (
            Media.objects.filter(is_public=True, category=category)
            .order_by("-created_at")
            .values_list("created_at", flat=True)
            .first()
        )
        return _freshness(latest, now, RELOF_DOCUMENTS_FRESHNESS_DAYS, subject)

    return check


def _published_gallery(now: datetime) -> Evaluation:
    galleries = Gallery.objects.filter(status=STATUS_PUBLISHED).annotate(image_count=Count("images"))
    if not galleries.exists():
        return Evaluation(STATUS_MISSING, ["Нема објављених галерија"])
    if not galleries.filter(image_count__gt=0).exists():
        return Evaluation(STATUS_PARTIAL, ["Објављене галерије немају слике"])
    return Evaluation(STATUS_FULFILLED)


def _recent_posts(now: datetime) -> Evaluation:
    latest = (
        Post.objects.filter(status=STATUS_PUBLISHED, published_at__isnull=False)
        .order_by("-published_at")
        .values_list("published_at", flat=True)
        .first()
    )
    return _freshness(latest, now, RELOF_POSTS_FRESHNESS_DAYS, "вести")


def _categorized_posts(now: datetime) -> Evaluation:
    published = Post.objects.filter(status=STATUS_PUBLISHED)
    if not published.exists():
        return Evaluation(STATUS_MISSING, ["Нема објављених вести"])
    uncategorized = published.filter(category__isnull=True).count()
    if uncategorized:
        return Evaluation(STATUS_PARTIAL, [f"{uncategorized} објава нема категорију"])
    return Evaluation(STATUS_FULFILLED)


SOCIAL_SETTINGS: Final[tuple[str, ...]] = ("facebookUrl", "instagramUrl", "twitterUrl", "youtubeUrl", "linkedinUrl")


def _social_links(now: datetime) -> Evaluation:
    configured = [key for key in SOCIAL_SETTINGS if _setting_present(key)]
    if not configured:
        return Evaluation(STATUS_MISSING, ["Ниједна друштвена мрежа није повезана"])
    if len(configured) == 1:
        return Evaluation(STATUS_PARTIAL, ["Повезана је само једна друштвена мрежа"])
    return Evaluation(STATUS_FULFILLED)


# ===============================================================================
# REGISTRY
# ===============================================================================

REQUIREMENTS: Final[tuple[Requirement, ...]] = (
    # Basic info
    Requirement(
        "site_name",
        "Назив институције",
        "Званични назив институције је истакнут на сајту",
        "basic_info",
        PRIORITY_CRITICAL,
        10,
        _setting_check("siteName", "Назив сајта"),
        ("Унесите званични назив у подешавањима сајта",),
    ),
    Requirement(
        "site_description",
        "Опис институције",
        "Кратак опис делатности институције",
        "basic_info",
        PRIORITY_MEDIUM,
        5,
        _site_description,
        ("Попуните опис сајта у општим подешавањима",),
    ),
    Requirement(
        "site_logo",
        "Лого",
        "Лого институције је постављен",
        "basic_info",
        PRIORITY_LOW,
        3,
        _setting_check("siteLogo", "Лого"),
        ("Отпремите лого у подешавањима изгледа",),
    ),
    Requirement(
        "about_page",
        "Страница о институцији",
        "Објављена страница са основним информацијама о институцији",
        "basic_info",
        PRIORITY_HIGH,
        8,
        _published_page_check("about"),
        ("Креирајте страницу са шаблоном „О институцији“", "Објавите страницу"),
    ),
    # Contact info
    Requirement(
        "contact_email",
        "Контакт е-пошта",
        "Званична адреса електронске поште",
        "contact_info",
        PRIORITY_CRITICAL,
        10,
        _setting_check("contactEmail", "Е-пошта"),
        ("Унесите контакт е-пошту у подешавањима",),
    ),
    Requirement(
        "contact_phone",
        "Контакт телефон",
        "Број телефона за грађане",
        "contact_info",
        PRIORITY_HIGH,
        5,
        _setting_check("contactPhone", "Телефон"),
        ("Унесите контакт телефон у подешавањима",),
    ),
    Requirement(
        "contact_address",
        "Адреса",
        "Адреса седишта институције",
        "contact_info",
        PRIORITY_HIGH,
        5,
        _setting_check("contactAddress", "Адреса"),
        ("Унесите адресу у подешавањима",),
    ),
    Requirement(
        "working_hours",
        "Радно време",
        "Радно време за рад са странкама",
        "contact_info",
        PRIORITY_MEDIUM,
        4,
        _setting_check("workingHours", "Радно време"),
        ("Унесите радно време у подешавањима",),
    ),
    Requirement(
        "contact_page",
        "Контакт страница",
        "Објављена контакт страница са формом",
        "contact_info",
        PRIORITY_MEDIUM,
        5,
        _published_page_check("contact"),
        ("Креирајте страницу са шаблоном „Контакт“",),
    ),
    # Organizational structure
    Requirement(
        "organizational_units",
        "Организационе јединице",
        "Организационе јединице са руководиоцима",
        "organizational_structure",
        PRIORITY_HIGH,
        10,
        _organizational_units,
        ("Унесите организационе јединице", "Наведите руководиоца сваке јединице"),
    ),
    Requirement(
        "current_director",
        "Руководилац институције",
        "Подаци о тренутном директору са биографијом и фотографијом",
        "organizational_structure",
        PRIORITY_CRITICAL,
        10,
        _current_director,
        ("Означите тренутног директора", "Додајте биографију и фотографију"),
    ),
    Requirement(
        "director_documents",
        "Акт о именовању",
        "Јавно доступни документи о именовању директора",
        "organizational_structure",
        PRIORITY_MEDIUM,
        5,
        _director_documents,
        ("Отпремите решење о именовању", "Означите документ као јаван"),
    ),
    # Services
    Requirement(
        "public_services",
        "Услуге за грађане",
        "Објављене услуге са обрасцима и упутствима",
        "services",
        PRIORITY_HIGH,
        10,
        _public_services,
        ("Унесите услуге које институција пружа", "Приложите обрасце уз сваку услугу"),
    ),
    Requirement(
        "service_contacts",
        "Контакт за услуге",
        "Свака услуга има контакт телефон или е-пошту",
        "services",
        PRIORITY_MEDIUM,
        5,
        _service_contacts,
        ("Допуните контакт податке услуга",),
    ),
    # Documents
    Requirement(
        "public_documents",
        "Јавни документи",
        "Документи од јавног значаја разврстани по категоријама",
        "documents",
        PRIORITY_CRITICAL,
        10,
        _public_documents,
        ("Отпремите документе у медијску библиотеку", "Разврстајте документе по категоријама"),
    ),
    Requirement(
        "financial_reports",
        "Финансијски извештаји",
        "Буџет и финансијски извештаји за текућу годину",
        "documents",
        PRIORITY_HIGH,
        8,
        _document_category_check(Media.CATEGORY_FINANCIAL, "финансијски документи"),
        ("Објавите буџет и завршни рачун", "Ажурирајте извештаје сваке године"),
    ),
    Requirement(
        "procurement",
        "Јавне набавке",
        "Планови и огласи јавних набавки",
        "documents",
        PRIORITY_HIGH,
        8,
        _document_category_check(Media.CATEGORY_PROCUREMENT, "јавне набавке"),
        ("Објавите план јавних набавки", "Објављујте огласе за сваку набавку"),
    ),
    Requirement(
        "transparency_page",
        "Информације од јавног значаја",
        "Објављена страница транспарентности или документације",
        "documents",
        PRIORITY_MEDIUM,
        5,
        _published_page_check("transparency", "documentation"),
        ("Креирајте страницу са шаблоном „Транспарентност“",),
    ),
    # Gallery
    Requirement(
        "published_gallery",
        "Фото галерија",
        "Бар једна објављена галерија са сликама",
        "gallery",
        PRIORITY_LOW,
        5,
        _published_gallery,
        ("Креирајте галерију", "Додајте слике и објавите галерију"),
    ),
    # Posts activity
    Requirement(
        "recent_posts",
        "Редовне вести",
        f"Вест објављена у последњих {RELOF_POSTS_FRESHNESS_DAYS} дана",
        "posts_activity",
        PRIORITY_HIGH,
        10,
        _recent_posts,
        ("Објавите нову вест", "Планирајте редовно објављивање"),
    ),
    Requirement(
        "categorized_posts",
        "Категорисане вести",
        "Све објављене вести имају категорију",
        "posts_activity",
        PRIORITY_LOW,
        3,
        _categorized_posts,
        ("Доделите категорије објавама",),
    ),
    # Social media
    Requirement(
        "social_links",
        "Друштвене мреже",
        "Профили на друштвеним мрежама су повезани са сајтом",
        "social_media",
        PRIORITY_MEDIUM,
        5,
        _social_links,
        ("Унесите адресе профила у подешавањима друштвених мрежа",),
    ),
)

REQUIREMENTS_BY_KEY: Final[dict[str, Requirement]] = {requirement.key: requirement for requirement in REQUIREMENTS}


def evaluate_all(now: datetime | None = None) -> list[dict[str, Any]]:
    now = now or timezone.now()
    return [requirement.evaluate(now) for requirement in REQUIREMENTS]
