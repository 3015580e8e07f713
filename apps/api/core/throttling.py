# ===============================================================================
# API THROTTLING CLASSES 🚦
# ===============================================================================

from rest_framework.throttling import AnonRateThrottle, UserRateThrottle


class StandardAPIThrottle(UserRateThrottle):
    """Standard rate limiting for dashboard API endpoints"""

    scope = "user"


class BurstAPIThrottle(UserRateThrottle):
    """Per-minute limit for search and autocomplete endpoints"""

    scope = "burst"


class AuthThrottle(AnonRateThrottle):
    """Restrictive rate limiting for login and the public contact form"""

    scope = "auth"
