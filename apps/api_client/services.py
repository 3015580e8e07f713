"""
CMS API Client (scripts, importers, integration jobs → CMS API)

Token authentication: ``login()`` stores the API token and every following
request carries ``Authorization: Token <token>``. Request and response bodies
are camelCase JSON, exactly as the REST API speaks them.
"""

# ===============================================================================
# CMS API CLIENT SERVICE 🔗
# ===============================================================================

from __future__ import annotations

import json
import logging
from typing import Any, BinaryIO

import requests
from django.conf import settings

from apps.common.utils import snake_to_camel

# HTTP status code constants
HTTP_OK = 200
HTTP_NO_CONTENT = 204
HTTP_MULTIPLE_CHOICES = 300
HTTP_PRECONDITION_FAILED = 412

logger = logging.getLogger(__name__)


class CMSAPIError(Exception):
    """Exception raised when CMS API calls fail"""

    def __init__(self, message: str, status_code: int | None = None, response_data: dict | None = None):
        self.message = message
        self.status_code = status_code
        self.response_data = response_data
        super().__init__(message)


class SetupRequiredError(CMSAPIError):
    """The CMS answered 412: the setup wizard has not been completed"""


def parse_setting_value(setting: dict[str, Any]) -> Any:
    """Typed value of a raw setting row (``value`` is always a string on the wire)"""
    value = setting.get("value")
    setting_type = setting.get("type")
    if value is None:
        return None
    if setting_type == "number":
        try:
            return int(value)
        except (TypeError, ValueError):
            try:
                return float(value)
            except (TypeError, ValueError):
                return value
    if setting_type == "boolean":
        return str(value).lower() == "true"
    if setting_type == "json":
        try:
            return json.loads(value)
        except (TypeError, ValueError):
            return value
    return value


# ===============================================================================
# RESOURCE GROUPS
# ===============================================================================


class Resource:
    """CRUD helpers for one REST collection; subclasses add its extra routes"""

    prefix = ""

    def __init__(self, client: CMSAPIClient):
        self.client = client

    def _path(self, *parts: Any) -> str:
        return "/".join([self.prefix, *(str(part) for part in parts)])

    def list(self, **params: Any) -> Any:
        return self.client.get(self.prefix, params=params)

    def get(self, object_id: int) -> Any:
        return self.client.get(self._path(object_id))

    def create(self, data: dict[str, Any]) -> Any:
        return self.client.post(self.prefix, data=data)

    def update(self, object_id: int, data: dict[str, Any]) -> Any:
        return self.client.patch(self._path(object_id), data=data)

    def delete(self, object_id: int) -> Any:
        return self.client.delete(self._path(object_id))


class PostsResource(Resource):
    prefix = "posts"

    def list(self, page: int = 1, limit: int = 10, **params: Any) -> Any:
        return self.client.get(self.prefix, params={"page": page, "limit": limit, **params})

    def get_by_slug(self, slug: str) -> Any:
        return self.client.get(self._path("slug", slug))

    def increment_view(self, slug: str) -> Any:
        return self.client.post(self._path("slug", slug, "view"))

    def by_page(self, page_id: int, limit: int = 10) -> Any:
        return self.client.get(self._path("page", page_id), params={"limit": limit})

    def by_page_slug(self, page_slug: str, limit: int = 10) -> Any:
        return self.client.get(self._path("page-slug", page_slug), params={"limit": limit})

    def homepage(self, limit: int = 6) -> Any:
        return self.client.get(self._path("homepage"), params={"limit": limit})


class PagesResource(Resource):
    prefix = "pages"

    def hierarchy(self) -> Any:
        return self.client.get(self._path("hierarchy"))

    def selection(self) -> Any:
        return self.client.get(self._path("selection"))

    def available_parents(self, exclude_id: int | None = None) -> Any:
        params = {"excludeId": exclude_id} if exclude_id is not None else None
        return self.client.get(self._path("available-parents"), params=params)

    def get_by_slug(self, slug: str) -> Any:
        return self.client.get(self._path("slug", slug))

    def templates(self, category: str | None = None) -> Any:
        return self.client.get(self._path("templates"), params={"category": category} if category else None)

    def sections(self, page_id: int) -> Any:
        return self.client.get(self._path(page_id, "sections"))

    def add_section(self, page_id: int, data: dict[str, Any]) -> Any:
        return self.client.post(self._path(page_id, "sections"), data=data)

    def reorder_sections(self, page_id: int, sections: list[dict[str, int]]) -> Any:
        return self.client.put(self._path(page_id, "sections", "reorder"), data={"sections": sections})


class CategoriesResource(Resource):
    prefix = "categories"

    def get_by_slug(self, slug: str) -> Any:
        return self.client.get(self._path("slug", slug))


class MediaResource(Resource):
    prefix = "media"

    def categories(self) -> Any:
        return self.client.get(self._path("categories"))

    def stats(self) -> Any:
        return self.client.get(self._path("stats"))

    def by_category(self, category: str) -> Any:
        return self.client.get(self._path("category", category))

    def upload(self, file: BinaryIO, filename: str, **metadata: Any) -> Any:
        return self.client.upload(self.prefix, files={"file": (filename, file)}, data=metadata)

    def replace(self, media_id: int, file: BinaryIO, filename: str, **metadata: Any) -> Any:
        return self.client.upload(self._path(media_id, "replace"), files={"file": (filename, file)}, data=metadata)

    def file_url(self, filename: str) -> str:
        return self.client.media_file_url(filename)


class GalleriesResource(Resource):
    prefix = "galleries"

    def get_by_slug(self, slug: str) -> Any:
        return self.client.get(self._path("slug", slug))

    def statistics(self) -> Any:
        return self.client.get(self._path("statistics"))

    def types(self) -> Any:
        return self.client.get(self._path("types"))

    def images(self, gallery_id: int) -> Any:
        return self.client.get(self._path(gallery_id, "images"))

    def upload_images(self, gallery_id: int, files: list[tuple[str, BinaryIO]], **metadata: Any) -> Any:
        return self.client.upload(
            self._path(gallery_id, "images"),
            files=[("files", (filename, file)) for filename, file in files],
            data=metadata,
        )

    def update_image(self, gallery_id: int, image_id: int, data: dict[str, Any]) -> Any:
        return self.client.patch(self._path(gallery_id, "images", image_id), data=data)

    def delete_image(self, gallery_id: int, image_id: int) -> Any:
        return self.client.delete(self._path(gallery_id, "images", image_id))

    def reorder_images(self, gallery_id: int, images: list[dict[str, int]]) -> Any:
        return self.client.put(self._path(gallery_id, "images", "reorder"), data={"images": images})

    def set_cover(self, gallery_id: int, image_id: int) -> Any:
        return self.client.post(self._path(gallery_id, "cover"), data={"imageId": image_id})

    def add_media(self, gallery_id: int, media_ids: list[int]) -> Any:
        return self.client.post(self._path(gallery_id, "media"), data={"mediaIds": media_ids})

    def image_url(self, filename: str) -> str:
        clean = filename.replace("\\", "/").rsplit("/", 1)[-1]
        return f"{self.client.base_url}/galleries/images/{clean}"


class ServicesResource(Resource):
    prefix = "services"

    def get_by_slug(self, slug: str) -> Any:
        return self.client.get(self._path("slug", slug))

    def statistics(self) -> Any:
        return self.client.get(self._path("statistics"))

    def register_request(self, service_id: int) -> Any:
        return self.client.post(self._path(service_id, "request"))

    def documents(self, service_id: int) -> Any:
        return self.client.get(self._path(service_id, "documents"))

    def upload_document(self, service_id: int, file: BinaryIO, filename: str, **metadata: Any) -> Any:
        return self.client.upload(
            self._path(service_id, "documents"), files={"file": (filename, file)}, data=metadata
        )

    def download_document(self, service_id: int, document_id: int) -> bytes:
        return self.client.get_binary(self._path(service_id, "documents", document_id, "download"))


class OrganizationResource(Resource):
    prefix = "organizational-structure/units"

    def tree(self) -> Any:
        return self.client.get(self._path("tree"))

    def roots(self) -> Any:
        return self.client.get(self._path("roots"))

    def get_by_code(self, code: str) -> Any:
        return self.client.get(self._path("code", code))

    def descendants(self, unit_id: int) -> Any:
        return self.client.get(self._path(unit_id, "descendants"))

    def ancestors(self, unit_id: int) -> Any:
        return self.client.get(self._path(unit_id, "ancestors"))

    def move(self, unit_id: int, new_parent_id: int | None) -> Any:
        return self.client.patch(self._path(unit_id, "move"), data={"newParentId": new_parent_id})

    def statistics(self) -> Any:
        return self.client.get(self._path("statistics"))

    def export(self) -> Any:
        return self.client.get(self._path("export"))


class DirectorsResource(Resource):
    prefix = "organizational-structure/directors"

    def current(self) -> Any:
        return self.client.get(self._path("current"))

    def set_current(self, director_id: int) -> Any:
        return self.client.post(self._path(director_id, "set-current"))

    def statistics(self) -> Any:
        return self.client.get(self._path("statistics"))

    def document_types(self) -> Any:
        return self.client.get(self._path("document-types"))

    def documents(self, director_id: int) -> Any:
        return self.client.get(self._path(director_id, "documents"))

    def upload_document(self, director_id: int, file: BinaryIO, filename: str, **metadata: Any) -> Any:
        return self.client.upload(
            self._path(director_id, "documents"), files={"file": (filename, file)}, data=metadata
        )

    def update_document(self, director_id: int, document_id: int, data: dict[str, Any]) -> Any:
        return self.client.patch(self._path(director_id, "documents", document_id), data=data)

    def delete_document(self, director_id: int, document_id: int) -> Any:
        return self.client.delete(self._path(director_id, "documents", document_id))

    def upload_biography(self, director_id: int, file: BinaryIO, filename: str) -> Any:
        return self.client.upload(self._path(director_id, "biography"), files={"file": (filename, file)})

    def upload_profile_image(self, director_id: int, file: BinaryIO, filename: str) -> Any:
        return self.client.upload(self._path(director_id, "profile-image"), files={"file": (filename, file)})

    def file_url(self, filename: str) -> str:
        return f"{self.client.base_url}/{self.prefix}/files/{filename.rsplit('/', 1)[-1]}"


class UsersResource(Resource):
    prefix = "users"

    def list(self, with_stats: bool = False, **params: Any) -> Any:
        if with_stats:
            params["withStats"] = "true"
        return self.client.get(self.prefix, params=params)

    def statistics(self) -> Any:
        return self.client.get(self._path("statistics"))

    def toggle_status(self, user_id: int) -> Any:
        return self.client.patch(self._path(user_id, "toggle-status"))

    def set_status(self, user_id: int, is_active: bool) -> Any:
        return self.client.patch(self._path(user_id, "status"), data={"isActive": is_active})

    def me(self) -> Any:
        return self.client.get(self._path("me"))

    def update_profile(self, data: dict[str, Any]) -> Any:
        return self.client.patch(self._path("me"), data=data)


class SettingsResource(Resource):
    prefix = "settings"

    def public(self) -> Any:
        return self.client.get(self._path("public"))

    def structured(self) -> Any:
        return self.client.get(self._path("structured"))

    def by_category(self, category: str) -> Any:
        return self.client.get(self._path("category", category))

    def get(self, key: str) -> Any:  # type: ignore[override]
        return self.client.get(self._path(key))

    def update(self, key: str, value: Any) -> Any:  # type: ignore[override]
        return self.client.put(self._path(key), data={"value": value})

    def bulk_update(self, items: list[dict[str, Any]]) -> Any:
        return self.client.put(self._path("bulk"), data={"settings": items})

    def upload_file(self, key: str, file: BinaryIO, filename: str) -> Any:
        return self.client.upload(self._path(key, "upload"), files={"file": (filename, file)})

    def reset(self, category: str | None = None) -> Any:
        return self.client.post(self._path("reset"), data={"category": category} if category else {})

    def export(self) -> Any:
        return self.client.get(self._path("export"))

    def import_settings(self, values: dict[str, Any]) -> Any:
        return self.client.post(self._path("import"), data={"settings": values})


class SetupResource(Resource):
    prefix = "setup"

    def status(self) -> Any:
        return self.client.get(self._path("status"))

    def check_admin(self) -> Any:
        return self.client.get(self._path("check-admin"))

    def templates(self) -> Any:
        return self.client.get(self._path("templates"))

    def complete(self, data: dict[str, Any]) -> Any:
        response = self.client.post(self._path("complete"), data=data)
        if isinstance(response, dict) and response.get("access_token"):
            self.client.token = response["access_token"]
        return response


class RelofResource(Resource):
    prefix = "relof-index"

    def dashboard(self) -> Any:
        return self.client.get(self._path("dashboard"))

    def recalculate(self, reason: str = "manual", background: bool = False) -> Any:
        params = {"async": "true"} if background else None
        return self.client.post(self._path("recalculate"), data={"reason": reason}, params=params)

    def notify(self) -> Any:
        return self.client.post(self._path("notify"))

    def requirements(self, **filters: Any) -> Any:
        return self.client.get(self._path("requirements"), params=filters)

    def recommendations(self, priority: str | None = None, limit: int | None = None) -> Any:
        params = {key: value for key, value in (("priority", priority), ("limit", limit)) if value is not None}
        return self.client.get(self._path("recommendations"), params=params)

    def statistics(self, period: str = "30d") -> Any:
        return self.client.get(self._path("statistics"), params={"period": period})

    def history(self, days: int = 30) -> Any:
        return self.client.get(self._path("history"), params={"days": days})

    def categories(self) -> Any:
        return self.client.get(self._path("categories"))


class MailerResource(Resource):
    prefix = "contacts"

    def submit_contact(self, data: dict[str, Any]) -> Any:
        return self.client.post("contact", data=data)

    def mark_read(self, contact_id: int, is_read: bool = True) -> Any:
        return self.client.patch(self._path(contact_id, "read"), data={"isRead": is_read})

    def reply(self, contact_id: int, message: str) -> Any:
        return self.client.post(self._path(contact_id, "reply"), data={"message": message})

    def subscribe(self, email: str, name: str = "") -> Any:
        return self.client.post("newsletter/subscribe", data={"email": email, "name": name})

    def unsubscribe(self, token: str) -> Any:
        return self.client.post(f"newsletter/unsubscribe/{token}")

    def subscribers(self, active_only: bool = False) -> Any:
        return self.client.get("newsletter/subscribers", params={"activeOnly": "true"} if active_only else None)

    def send_newsletter(self, subject: str, body: str) -> Any:
        return self.client.post("newsletter/send", data={"subject": subject, "body": body})

    def templates(self) -> Any:
        return self.client.get("email-templates")

    def create_template(self, data: dict[str, Any]) -> Any:
        return self.client.post("email-templates", data=data)

    def update_template(self, template_id: int, data: dict[str, Any]) -> Any:
        return self.client.patch(f"email-templates/{template_id}", data=data)

    def delete_template(self, template_id: int) -> Any:
        return self.client.delete(f"email-templates/{template_id}")

    def render_template(self, template_id: int, context: dict[str, Any]) -> Any:
        return self.client.post(f"email-templates/{template_id}/render", data={"context": context})


class SearchResource(Resource):
    prefix = "search"

    def __call__(self, query: str) -> Any:
        return self.client.get(self.prefix, params={"q": query})


class PublicResource(Resource):
    prefix = "public"

    def resolve(self, slug: str) -> Any:
        return self.client.get(self._path("resolve", slug.strip("/")))

    def homepage(self) -> Any:
        return self.client.get(self._path("homepage"))

    def categories(self) -> Any:
        return self.client.get(self._path("categories"))

    def pages(self) -> Any:
        return self.client.get(self._path("pages"))


# ===============================================================================
# CLIENT
# ===============================================================================


class CMSAPIClient:
    """
    Centralized API client for the Municipal CMS REST API.

    Handles:
    - Token authentication
    - JSON and multipart requests
    - Error mapping (CMSAPIError, SetupRequiredError on 412)
    - Namespaced resource groups mirroring the REST surface
    """

    def __init__(self, base_url: str | None = None, token: str | None = None, timeout: int | None = None) -> None:
        self.base_url = (base_url or settings.CMS_API_BASE_URL).rstrip("/")
        self.timeout = timeout or getattr(settings, "CMS_API_TIMEOUT", 30)
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        self.token = token

        self.posts = PostsResource(self)
        self.pages = PagesResource(self)
        self.categories = CategoriesResource(self)
        self.media = MediaResource(self)
        self.galleries = GalleriesResource(self)
        self.services = ServicesResource(self)
        self.organization = OrganizationResource(self)
        self.directors = DirectorsResource(self)
        self.users = UsersResource(self)
        self.settings = SettingsResource(self)
        self.setup = SetupResource(self)
        self.relof = RelofResource(self)
        self.mailer = MailerResource(self)
        self.search = SearchResource(self)
        self.public = PublicResource(self)

    @property
    def token(self) -> str | None:
        return self._token

    @token.setter
    def token(self, value: str | None) -> None:
        self._token = value
        if value:
            self.session.headers["Authorization"] = f"Token {value}"
        else:
            self.session.headers.pop("Authorization", None)

    # ---- Request plumbing ----
    def _build_url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _raise_for_response(self, response: requests.Response) -> None:
        try:
            error_data = response.json()
        except ValueError:
            error_data = {"error": response.text or "Invalid response format"}
        if not isinstance(error_data, dict):
            error_data = {"error": str(error_data)}

        message = error_data.get("error") or error_data.get("message") or error_data.get("detail") or "Unknown error"
        if response.status_code == HTTP_PRECONDITION_FAILED and error_data.get("setupRequired"):
            raise SetupRequiredError(str(message), status_code=response.status_code, response_data=error_data)
        raise CMSAPIError(
            message=f"API request failed: {message}",
            status_code=response.status_code,
            response_data=error_data,
        )

    def _handle_api_response(self, response: requests.Response) -> Any:
        if HTTP_OK <= response.status_code < HTTP_MULTIPLE_CHOICES:
            if response.status_code == HTTP_NO_CONTENT or not response.content:
                return None
            try:
                return response.json()
            except ValueError:
                return {"success": True}
        self._raise_for_response(response)
        return None

    def _send(self, method: str, endpoint: str, **kwargs: Any) -> requests.Response:
        url = self._build_url(endpoint)
        try:
            response = self.session.request(method=method, url=url, timeout=self.timeout, **kwargs)
        except requests.exceptions.ConnectionError as e:
            logger.error(f"🔥 [API Client] Connection failed to CMS API: {url}")
            raise CMSAPIError("CMS API unavailable") from e
        except requests.exceptions.Timeout as e:
            logger.error(f"🔥 [API Client] Timeout connecting to CMS API: {url}")
            raise CMSAPIError("CMS API timeout") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"🔥 [API Client] Request error: {e}")
            raise CMSAPIError(f"Request failed: {e!s}") from e

        logger.debug(f"🌐 [API Client] {method} {url} -> {response.status_code}")
        return response

    def request(
        self,
        method: str,
        endpoint: str,
        data: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        clean_params = {key: value for key, value in (params or {}).items() if value is not None} or None
        response = self._send(method, endpoint, json=data, params=clean_params)
        return self._handle_api_response(response)

    def get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, data: dict[str, Any] | None = None, params: dict[str, Any] | None = None) -> Any:
        return self.request("POST", endpoint, data=data, params=params)

    def put(self, endpoint: str, data: dict[str, Any] | None = None) -> Any:
        return self.request("PUT", endpoint, data=data)

    def patch(self, endpoint: str, data: dict[str, Any] | None = None) -> Any:
        return self.request("PATCH", endpoint, data=data)

    def delete(self, endpoint: str) -> Any:
        return self.request("DELETE", endpoint)

    def upload(self, endpoint: str, files: Any, data: dict[str, Any] | None = None, method: str = "POST") -> Any:
        """Multipart upload; ``files`` accepts anything ``requests`` does"""
        form = {key: value for key, value in (data or {}).items() if value is not None}
        response = self._send(method, endpoint, files=files, data=form)
        return self._handle_api_response(response)

    def get_binary(self, endpoint: str) -> bytes:
        response = self._send("GET", endpoint)
        if HTTP_OK <= response.status_code < HTTP_MULTIPLE_CHOICES:
            return response.content
        self._raise_for_response(response)
        return b""

    # ===============================================================================
    # AUTHENTICATION
    # ===============================================================================

    def login(self, email: str, password: str) -> dict[str, Any]:
        """Exchange credentials for an API token; later requests are authenticated"""
        data = self.post("auth/login", data={"email": email, "password": password})
        self.token = data.get("access_token")
        logger.info(f"🔐 [API Client] Logged in as {email}")
        return data

    def logout(self) -> None:
        if self.token:
            self.post("auth/logout")
        self.token = None

    def profile(self) -> Any:
        return self.get("auth/profile")

    # ===============================================================================
    # HELPERS
    # ===============================================================================

    def get_settings_structured(self) -> dict[str, Any]:
        """All settings as ``{camelKey: typed value}`` built from the raw setting list"""
        structured: dict[str, Any] = {}
        for setting in self.settings.list() or []:
            structured[snake_to_camel(setting["key"])] = parse_setting_value(setting)
        return structured

    def media_file_url(self, filename: str) -> str:
        clean = filename[len("uploads/") :] if filename.startswith("uploads/") else filename
        return f"{self.base_url}/media/file/{clean}"
