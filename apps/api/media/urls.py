# ===============================================================================
# MEDIA API URLS 🖼️
# ===============================================================================

from django.urls import include, path

from apps.api.core import OptionalSlashRouter

from . import views

router = OptionalSlashRouter()
router.register("media", views.MediaViewSet, basename="media")

urlpatterns = [
    path("media/file/<str:filename>", views.media_file_api, name="media-file"),
    path("", include(router.urls)),
]
