"""
Municipal CMS Platform Constants

Centralized constants for content limits, pagination and scoring thresholds
shared by several apps.
"""

from typing import Final

# ===============================================================================
# PAGINATION & LISTS 📄
# ===============================================================================

DEFAULT_PAGE_SIZE: Final[int] = 10
MAX_PAGE_SIZE: Final[int] = 100

RECENT_ACTIVITY_LIMIT: Final[int] = 10
RECENT_USERS_DAYS: Final[int] = 30

# ===============================================================================
# CONTENT LIMITS 📰
# ===============================================================================

TITLE_MAX_LENGTH: Final[int] = 255
SLUG_MAX_LENGTH: Final[int] = 255
EXCERPT_MAX_LENGTH: Final[int] = 500

SITE_NAME_MAX_LENGTH: Final[int] = 100
SITE_TAGLINE_MAX_LENGTH: Final[int] = 200
ADMIN_NAME_MAX_LENGTH: Final[int] = 100

PASSWORD_MIN_LENGTH: Final[int] = 6
PASSWORD_MAX_LENGTH: Final[int] = 50

# Section copies get this suffix in the page builder
SECTION_COPY_SUFFIX: Final[str] = " (копија)"

# ===============================================================================
# RELOF INDEX 📊
# ===============================================================================

RELOF_GRADE_THRESHOLDS: Final[tuple[tuple[float, str], ...]] = (
    (90.0, "Одличан"),
    (80.0, "Веома добар"),
    (70.0, "Добар"),
    (60.0, "Задовољавајући"),
    (50.0, "Довољан"),
)
RELOF_GRADE_FAILING: Final[str] = "Незадовољавајући"

RELOF_COLOR_THRESHOLDS: Final[tuple[tuple[float, str], ...]] = (
    (80.0, "green"),
    (60.0, "yellow"),
    (40.0, "orange"),
)
RELOF_COLOR_FAILING: Final[str] = "red"

# Content older than this is "outdated" for freshness requirements
RELOF_POSTS_FRESHNESS_DAYS: Final[int] = 30
RELOF_DOCUMENTS_FRESHNESS_DAYS: Final[int] = 365
