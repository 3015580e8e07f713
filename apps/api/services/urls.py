# ===============================================================================
# PUBLIC SERVICES API URLS 🏛️
# ===============================================================================

from django.urls import include, path

from apps.api.core import OptionalSlashRouter

from .views import ServiceViewSet

router = OptionalSlashRouter()
router.register("services", ServiceViewSet, basename="services")

urlpatterns = [
    path("", include(router.urls)),
]
