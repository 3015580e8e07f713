# ===============================================================================
# CONTENT API VIEWS 📰
# ===============================================================================
#
# Categories, posts, pages with their page-builder sections, site search and
# public slug resolution.
#

from __future__ import annotations

import logging
from typing import Any, ClassVar

from django.db.models import QuerySet
from rest_framework import status
from rest_framework.decorators import action, api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from apps.api.core import (
    BaseAPIViewSet,
    BurstAPIThrottle,
    IsStaffMember,
    IsStaffOrReadOnly,
    error_response,
    result_response,
    validation_error_response,
)
from apps.common.constants import DEFAULT_PAGE_SIZE
from apps.common.types import ServiceError
from apps.content.models import STATUS_PUBLISHED, Category, Page, PageSection, Post
from apps.content.page_builder import SectionService
from apps.content.resolver import PublicContentResolver, ResolvedContent
from apps.content.search import SearchService
from apps.content.section_configs import SECTION_CONFIGS
from apps.content.services import (
    CategoryService,
    PageCreationRequest,
    PageService,
    PostCreationRequest,
    PostService,
)
from apps.content.templates import get_all_templates, get_templates_by_category

from .serializers import (
    CategorySerializer,
    CategoryWriteSerializer,
    PageSectionSerializer,
    PageSerializer,
    PageWithSectionsSerializer,
    PageWriteSerializer,
    PostSerializer,
    PostWriteSerializer,
    SectionReorderSerializer,
    SectionWriteSerializer,
)

logger = logging.getLogger(__name__)


def _is_staff(request: Request) -> bool:
    return IsStaffMember().has_permission(request, None)


def _int_param(request: Request, name: str, default: int) -> int:
    try:
        return int(request.query_params.get(name, default))
    except (TypeError, ValueError):
        return default


def _no_content(result: Any) -> Response:
    if result.is_err():
        return error_response(result.unwrap_err())
    return Response(status=status.HTTP_204_NO_CONTENT)


# ===============================================================================
# CATEGORIES 📂
# ===============================================================================


class CategoryViewSet(BaseAPIViewSet):
    """
    📂 Post categories

    Public reads include ``postsCount``; writes require a dashboard account.
    """

    serializer_class = CategorySerializer
    permission_classes: ClassVar = [IsStaffOrReadOnly]
    lookup_value_regex = r"\d+"

    def get_queryset(self) -> QuerySet[Category]:
        return CategoryService.list()

    def list(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        return self.list_response(self.get_queryset())

    def create(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        serializer = CategoryWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        data = serializer.validated_data
        result = CategoryService.create(
            data.get("name", ""), description=data.get("description", ""), slug=data.get("slug", "")
        )
        return self.respond(result, status.HTTP_201_CREATED)

    def update(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        category = self.get_object()
        serializer = CategoryWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return self.respond(CategoryService.update(category, **serializer.validated_data))

    def destroy(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        CategoryService.delete(self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"], url_path=r"slug/(?P<slug>[^/]+)")
    def by_slug(self, request: Request, slug: str) -> Response:
        return self.respond(CategoryService.get_by_slug(slug))


# ===============================================================================
# POSTS 📰
# ===============================================================================


class PostViewSet(BaseAPIViewSet):
    """
    📰 News posts

    GET  /api/posts?page=&limit=&status=&category=&search=&author=
    GET  /api/posts/slug/{slug}          POST /api/posts/slug/{slug}/view
    GET  /api/posts/page/{pageId}        GET  /api/posts/page-slug/{slug}
    GET  /api/posts/homepage

    Anonymous visitors only see published posts. Authors edit their own posts.
    """

    serializer_class = PostSerializer
    permission_classes: ClassVar = [IsStaffOrReadOnly]
    lookup_value_regex = r"\d+"

    def get_queryset(self) -> QuerySet[Post]:
        queryset = Post.objects.select_related("author", "category").prefetch_related("pages")
        if not _is_staff(self.request):
            queryset = queryset.filter(status=STATUS_PUBLISHED)
        return queryset

    def list(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        params = request.query_params
        filters: dict[str, Any] = {
            "category": params.get("category"),
            "search": params.get("search"),
            "author": _int_param(request, "author", 0) or None,
            "status": params.get("status") if _is_staff(request) else STATUS_PUBLISHED,
        }
        paged = PostService.paged(
            page=_int_param(request, "page", 1),
            limit=_int_param(request, "limit", DEFAULT_PAGE_SIZE),
            **filters,
        )
        paged["posts"] = self.serialize(paged["posts"], many=True)
        return Response(paged)

    def create(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        serializer = PostWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        result = PostService.create(PostCreationRequest(**serializer.validated_data), author=request.user)
        return self.respond(result, status.HTTP_201_CREATED)

    def update(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        post = self.get_object()
        serializer = PostWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return self.respond(PostService.update(post, user=request.user, **serializer.validated_data))

    def destroy(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        return _no_content(PostService.delete(self.get_object(), user=request.user))

    @action(detail=False, methods=["get"], url_path=r"slug/(?P<slug>[^/]+)")
    def by_slug(self, request: Request, slug: str) -> Response:
        return self.respond(PostService.get_by_slug(slug, published_only=not _is_staff(request)))

    @action(
        detail=False,
        methods=["post"],
        url_path=r"slug/(?P<slug>[^/]+)/view",
        permission_classes=[AllowAny],
    )
    def register_view(self, request: Request, slug: str) -> Response:
        return result_response(PostService.increment_view(slug), lambda count: {"viewCount": count})

    @action(detail=False, methods=["get"], url_path=r"page/(?P<page_id>\d+)")
    def by_page(self, request: Request, page_id: str) -> Response:
        limit = _int_param(request, "limit", 0) or None
        return Response(self.serialize(PostService.by_page(int(page_id), limit=limit), many=True))

    @action(detail=False, methods=["get"], url_path=r"page-slug/(?P<slug>[^/]+)")
    def by_page_slug(self, request: Request, slug: str) -> Response:
        limit = _int_param(request, "limit", 0) or None
        return Response(self.serialize(PostService.by_page_slug(slug, limit=limit), many=True))

    @action(detail=False, methods=["get"])
    def homepage(self, request: Request) -> Response:
        limit = _int_param(request, "limit", 6)
        return Response(self.serialize(PostService.homepage(limit), many=True))


# ===============================================================================
# PAGES 📄
# ===============================================================================


class PageViewSet(BaseAPIViewSet):
    """
    📄 Pages, hierarchy helpers and the page builder

    GET  /api/pages/templates            GET  /api/pages/hierarchy
    GET  /api/pages/selection            GET  /api/pages/available-parents?excludeId=
    GET  /api/pages/slug/{slug}
    GET|POST /api/pages/{id}/sections    PUT  /api/pages/{id}/sections/reorder
    """

    serializer_class = PageSerializer
    permission_classes: ClassVar = [IsStaffOrReadOnly]
    lookup_value_regex = r"\d+"

    def get_queryset(self) -> QuerySet[Page]:
        params = self.request.query_params
        if not _is_staff(self.request):
            return PageService.published().select_related("author")
        return PageService.list(status=params.get("status"), search=params.get("search"))

    def get_serializer_class(self) -> type:
        if self.action == "retrieve":
            return PageWithSectionsSerializer
        return PageSerializer

    def list(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        return self.list_response(self.get_queryset())

    def create(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        serializer = PageWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        data = dict(serializer.validated_data)
        if not data.get("template"):
            data.pop("template", None)
        result = PageService.create(PageCreationRequest(**data), author=request.user)
        return self.respond(result, status.HTTP_201_CREATED)

    def update(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        page = self.get_object()
        serializer = PageWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return self.respond(PageService.update(page, **serializer.validated_data))

    def destroy(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        return _no_content(PageService.delete(self.get_object()))

    @action(detail=False, methods=["get"], permission_classes=[AllowAny])
    def templates(self, request: Request) -> Response:
        category = request.query_params.get("category")
        return Response(get_templates_by_category(category) if category else get_all_templates())

    @action(detail=False, methods=["get"])
    def hierarchy(self, request: Request) -> Response:
        return Response(PageService.hierarchical(published_only=not _is_staff(request)))

    @action(detail=False, methods=["get"], permission_classes=[IsStaffMember])
    def selection(self, request: Request) -> Response:
        return Response(PageService.for_selection())

    @action(detail=False, methods=["get"], url_path="available-parents", permission_classes=[IsStaffMember])
    def available_parents(self, request: Request) -> Response:
        exclude_id = _int_param(request, "excludeId", 0) or None
        return Response(self.serialize(PageService.available_parents(exclude_id), many=True))

    @action(detail=False, methods=["get"], url_path=r"slug/(?P<slug>[^/]+)")
    def by_slug(self, request: Request, slug: str) -> Response:
        result = PageService.get_by_slug(slug, published_only=not _is_staff(request))
        return result_response(
            result,
            lambda page: PageWithSectionsSerializer(page, context={"visible_only": not _is_staff(request)}).data,
        )

    @action(detail=True, methods=["get", "post"], url_path="sections")
    def sections(self, request: Request, pk: str | None = None) -> Response:
        page = self.get_object()
        if request.method == "GET":
            queryset = SectionService.list(page, visible_only=not _is_staff(request))
            return Response(PageSectionSerializer(queryset, many=True).data)

        serializer = SectionWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        data = serializer.validated_data
        if not data.get("type"):
            return error_response(ServiceError("Section type is required", field="type"))
        result = SectionService.create(
            page,
            data["type"],
            name=data.get("name", ""),
            data=data.get("data"),
            is_visible=data.get("is_visible", True),
        )
        return result_response(result, lambda section: PageSectionSerializer(section).data, status_code=201)

    @action(
        detail=True,
        methods=["put", "post", "patch"],
        url_path="sections/reorder",
        permission_classes=[IsStaffMember],
    )
    def reorder_sections(self, request: Request, pk: str | None = None) -> Response:
        page = self.get_object()
        payload = request.data if isinstance(request.data, dict) else {"sections": request.data}
        serializer = SectionReorderSerializer(data=payload)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        result = SectionService.reorder(page, serializer.validated_data["sections"])
        return result_response(result, lambda sections: PageSectionSerializer(sections, many=True).data)


# ===============================================================================
# SECTIONS 🧱
# ===============================================================================


class SectionViewSet(BaseAPIViewSet):
    """
    🧱 Individual page-builder sections

    GET /api/sections/types              POST  /api/sections/{id}/duplicate
    PATCH /api/sections/{id}/toggle-visibility
    """

    queryset = PageSection.objects.select_related("page")
    serializer_class = PageSectionSerializer
    http_method_names: ClassVar = ["get", "put", "patch", "post", "delete", "head", "options"]
    lookup_value_regex = r"\d+"

    def list(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        queryset = self.get_queryset().order_by("page_id", "sort_order")
        if page_id := _int_param(request, "pageId", 0):
            queryset = queryset.filter(page_id=page_id)
        return self.list_response(queryset)

    def create(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        return Response(
            {"success": False, "error": "Create sections through /api/pages/{id}/sections"},
            status=status.HTTP_405_METHOD_NOT_ALLOWED,
        )

    def update(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        section = self.get_object()
        serializer = SectionWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        return self.respond(SectionService.update(section, **serializer.validated_data))

    def destroy(self, request: Request, *args: Any, **kwargs: Any) -> Response:
        return _no_content(SectionService.delete(self.get_object()))

    @action(detail=False, methods=["get"])
    def types(self, request: Request) -> Response:
        return Response([config.as_dict() for config in SECTION_CONFIGS.values()])

    @action(detail=True, methods=["post"])
    def duplicate(self, request: Request, pk: str | None = None) -> Response:
        return self.respond(SectionService.duplicate(self.get_object()), status.HTTP_201_CREATED)

    @action(detail=True, methods=["patch", "post"], url_path="toggle-visibility")
    def toggle_visibility(self, request: Request, pk: str | None = None) -> Response:
        return self.respond(SectionService.toggle_visibility(self.get_object()))


# ===============================================================================
# SEARCH 🔎
# ===============================================================================


@api_view(["GET"])
@permission_classes([AllowAny])
@throttle_classes([BurstAPIThrottle])
def search_api(request: Request) -> Response:
    """GET /api/search?q= - published posts and pages, Cyrillic/Latin insensitive"""
    results = SearchService.search(request.query_params.get("q", ""))
    results["posts"] = PostSerializer(results["posts"], many=True).data
    results["pages"] = PageSerializer(results["pages"], many=True).data
    return Response(results)


# ===============================================================================
# PUBLIC RESOLUTION 🧭
# ===============================================================================


def _serialize_resolved(resolved: ResolvedContent) -> dict[str, Any]:
    from apps.api.galleries.serializers import GalleryDetailSerializer  # noqa: PLC0415
    from apps.api.services.serializers import ServiceDetailSerializer  # noqa: PLC0415

    extra = resolved.extra
    if resolved.type == "post":
        data: Any = PostSerializer(resolved.obj).data
    elif resolved.type == "category":
        data = {
            "category": CategorySerializer(resolved.obj).data,
            "posts": PostSerializer(extra.get("posts", []), many=True).data,
        }
    elif resolved.type == "page":
        data = {
            "page": PageSerializer(resolved.obj).data,
            "sections": PageSectionSerializer(extra.get("sections", []), many=True).data,
            "pagePosts": PostSerializer(extra.get("pagePosts", []), many=True).data,
        }
        if "categories" in extra:
            data["categories"] = CategorySerializer(extra["categories"], many=True).data
        if "posts" in extra:
            data["posts"] = PostSerializer(extra["posts"], many=True).data
    elif resolved.type == "gallery":
        data = GalleryDetailSerializer(resolved.obj).data
    else:
        data = ServiceDetailSerializer(resolved.obj).data
    return {"type": resolved.type, "data": data}


@api_view(["GET"])
@permission_classes([AllowAny])
def resolve_slug_api(request: Request, slug: str) -> Response:
    """GET /api/public/resolve/{slug} -> ``{type, data}``"""
    return result_response(PublicContentResolver.resolve(slug), _serialize_resolved)


@api_view(["GET"])
@permission_classes([AllowAny])
def public_homepage_api(request: Request) -> Response:
    """GET /api/public/homepage - homepage page with visible sections and latest posts"""
    homepage = PublicContentResolver.homepage()
    return Response(
        {
            "page": PageSerializer(homepage["page"]).data if homepage["page"] else None,
            "sections": PageSectionSerializer(homepage["sections"], many=True).data,
            "posts": PostSerializer(homepage["posts"], many=True).data,
        }
    )


@api_view(["GET"])
@permission_classes([AllowAny])
def public_categories_api(request: Request) -> Response:
    """GET /api/public/categories - categories with published post counts"""
    return Response(CategorySerializer(CategoryService.with_published_posts(), many=True).data)


@api_view(["GET"])
@permission_classes([AllowAny])
def public_pages_api(request: Request) -> Response:
    """GET /api/public/pages - published page tree for navigation"""
    return Response(PageService.hierarchical(published_only=True))

