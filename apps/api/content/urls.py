# ===============================================================================
# CONTENT API URLS 📰
# ===============================================================================

from django.urls import include, path

from apps.api.core import OptionalSlashRouter, optional_slash_path

from . import views

router = OptionalSlashRouter()
router.register("categories", views.CategoryViewSet, basename="categories")
router.register("posts", views.PostViewSet, basename="posts")
router.register("pages", views.PageViewSet, basename="pages")
router.register("sections", views.SectionViewSet, basename="sections")

urlpatterns = [
    *optional_slash_path("search", views.search_api, name="search"),
    path("public/resolve/<path:slug>", views.resolve_slug_api, name="public-resolve"),
    *optional_slash_path("public/homepage", views.public_homepage_api, name="public-homepage"),
    *optional_slash_path("public/categories", views.public_categories_api, name="public-categories"),
    *optional_slash_path("public/pages", views.public_pages_api, name="public-pages"),
    path("", include(router.urls)),
]
