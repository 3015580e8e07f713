# ===============================================================================
# RELOF INDEX API URLS 📊
# ===============================================================================

from django.urls import include, path

from apps.api.core import OptionalSlashRouter

from . import views

router = OptionalSlashRouter()
router.register("relof-index", views.RelofIndexViewSet, basename="relof-index")

urlpatterns = [
    path("", include(router.urls)),
]
