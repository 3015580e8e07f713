# ===============================================================================
# USER API URLS 👤
# ===============================================================================

from django.urls import include, path

from apps.api.core import OptionalSlashRouter

from .views import UserViewSet

router = OptionalSlashRouter()
router.register("users", UserViewSet, basename="users")

app_name = "users"

urlpatterns = [
    path("", include(router.urls)),
]
