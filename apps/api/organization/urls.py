# ===============================================================================
# ORGANIZATIONAL STRUCTURE API URLS 🏢
# ===============================================================================

from django.urls import include, path

from apps.api.core import OptionalSlashRouter

from . import views

router = OptionalSlashRouter()
router.register("organizational-structure/units", views.OrganizationalUnitViewSet, basename="org-units")
router.register("organizational-structure/directors", views.DirectorViewSet, basename="directors")

urlpatterns = [
    path(
        "organizational-structure/directors/files/<str:filename>",
        views.director_file_api,
        name="director-file",
    ),
    path("", include(router.urls)),
]
