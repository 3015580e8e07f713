# ===============================================================================
# GALLERY API URLS 📸
# ===============================================================================

from django.urls import include, path

from apps.api.core import OptionalSlashRouter

from . import views

router = OptionalSlashRouter()
router.register("galleries", views.GalleryViewSet, basename="galleries")

urlpatterns = [
    path("galleries/images/<str:filename>", views.gallery_image_file_api, name="gallery-file"),
    path("", include(router.urls)),
]
