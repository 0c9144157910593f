import base64
import hmac
import json
import logging
import os
import uuid
from functools import wraps
from pathlib import Path
from typing import Any, Dict, Optional

from django.conf import settings
from django.core.paginator import Paginator
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from .access import AccessContext
from .actions.app_delete import AppDelete
from .errors import CloudControllerError, JobEnqueueError, NotFound, Unauthorized, ValidationFailed
from .handlers.droplets import DropletsHandler
from .handlers.packages import PackagesHandler
from .messages import PackageCreateMessage, PackageUploadMessage
from .models import Package
from .presenters import AppPresenter, DropletPresenter, PackagePresenter
from .queries.app_fetcher import AppFetcher
from .queries.syslog_drain_urls import SyslogDrainUrlsQuery

logger = logging.getLogger(__name__)


def _parse_json(request: HttpRequest) -> Dict[str, Any]:
    if request.body:
        try:
            payload = json.loads(request.body.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return {}
        return payload if isinstance(payload, dict) else {}
    return {}


def _request_params(request: HttpRequest) -> Dict[str, Any]:
    if request.content_type in ("multipart/form-data", "application/x-www-form-urlencoded"):
        return {key: request.POST.get(key) for key in request.POST.keys()}
    return _parse_json(request)


def _error(code: str, description: str, status: int, details=None) -> JsonResponse:
    body: Dict[str, Any] = {"error": code, "description": description}
    if details:
        body["details"] = details
    return JsonResponse(body, status=status)


def _method_not_allowed() -> JsonResponse:
    return _error("CF-MethodNotAllowed", "method not allowed", 405)


def _not_found(description: str) -> JsonResponse:
    return _error(NotFound.code, description, 404)


def api_view(view):
    @wraps(view)
    def _wrapped(request: HttpRequest, *args, **kwargs):
        if not request.user.is_authenticated:
            return _error("CF-NotAuthenticated", "Authentication error", 401)
        request.access_context = AccessContext.for_request(request)  # type: ignore[attr-defined]
        try:
            return view(request, *args, **kwargs)
        except ValidationFailed as exc:
            return _error(exc.code, exc.message, exc.status, exc.errors)
        except CloudControllerError as exc:
            return _error(exc.code, exc.message or str(exc), exc.status)
        except JobEnqueueError as exc:
            logger.error("job dispatch failed: %s", exc)
            return _error("CF-ServiceUnavailable", "job queue unavailable", 503)

    return csrf_exempt(_wrapped)


def _upload_dir() -> Path:
    path = Path(settings.CC_UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def _stage_bits(request: HttpRequest, params: Dict[str, Any]) -> Optional[str]:
    uploaded = request.FILES.get("bits")
    if uploaded is not None:
        target = _upload_dir() / f"{uuid.uuid4()}.zip"
        with open(target, "wb") as handle:
            for chunk in uploaded.chunks():
                handle.write(chunk)
        return str(target)
    bits_path = params.get("bits_path")
    if not bits_path:
        return None
    # Pre-staged paths (upload offloaded to the front proxy) must live in the upload dir.
    resolved = Path(str(bits_path)).resolve()
    if _upload_dir().resolve() not in resolved.parents:
        raise ValidationFailed(["The bits_path must be inside the upload directory."])
    return str(resolved)


def _discard(path: Optional[str]) -> None:
    if path and os.path.exists(path):
        os.remove(path)


def _paginate(request: HttpRequest, qs, presenter) -> JsonResponse:
    try:
        per_page = int(request.GET.get("per_page", settings.CC_DEFAULT_PAGE_SIZE))
        page_number = int(request.GET.get("page", 1))
    except ValueError:
        return _error("CF-BadQueryParameter", "page and per_page must be integers", 400)
    per_page = min(max(per_page, 1), settings.CC_MAX_BATCH_SIZE)
    paginator = Paginator(qs, per_page)
    page = paginator.get_page(page_number)
    return JsonResponse(
        {
            "pagination": {
                "total_results": paginator.count,
                "total_pages": paginator.num_pages,
                "next": page.next_page_number() if page.has_next() else None,
                "prev": page.previous_page_number() if page.has_previous() else None,
            },
            "resources": [presenter.to_payload(item) for item in page.object_list],
        }
    )


def _visible_packages(access_context: AccessContext):
    qs = Package.objects.select_related("app").order_by("id")
    if access_context.has_global_read:
        return qs
    return qs.filter(
        app__space__in=access_context.spaces(),
        app__space__organization__status="active",
    )


@api_view
def app_packages(request: HttpRequest, app_guid: str) -> HttpResponse:
    access_context = request.access_context
    if request.method == "GET":
        app = AppFetcher(access_context).fetch(app_guid)
        if app is None:
            return _not_found("App not found")
        return _paginate(request, Package.objects.filter(app=app).order_by("id"), PackagePresenter())
    if request.method != "POST":
        return _method_not_allowed()

    params = _request_params(request)
    message = PackageCreateMessage(app_guid, params)
    result = message.validate()
    if not result.ok:
        raise ValidationFailed(result.errors)

    has_bits = "bits" in request.FILES or bool(params.get("bits_path"))
    if has_bits and message.type != Package.BITS:
        raise ValidationFailed(["The bits field cannot be provided when type is docker."])

    bits_path = _stage_bits(request, params) if has_bits else None
    handler = PackagesHandler(settings.CC_CONFIG)
    package = None
    try:
        package = handler.create(message, access_context)
        if bits_path:
            package = handler.upload(PackageUploadMessage(package.guid, {"bits_path": bits_path}), access_context)
    except (CloudControllerError, JobEnqueueError):
        _discard(bits_path)
        if package is not None:
            # Never uploaded, so there is no blob to clean up.
            Package.objects.filter(pk=package.pk).delete()
        raise
    return JsonResponse(PackagePresenter().to_payload(package), status=201)


@api_view
def packages_collection(request: HttpRequest) -> HttpResponse:
    if request.method != "GET":
        return _method_not_allowed()
    return _paginate(request, _visible_packages(request.access_context), PackagePresenter())


@api_view
def package_detail(request: HttpRequest, guid: str) -> HttpResponse:
    handler = PackagesHandler(settings.CC_CONFIG)
    if request.method == "GET":
        try:
            package = handler.show(guid, request.access_context)
        except Unauthorized:
            package = None
        if package is None:
            return _not_found("Package not found")
        return JsonResponse(PackagePresenter().to_payload(package))
    if request.method == "DELETE":
        package = handler.delete(guid, request.access_context)
        if package is None:
            return _not_found("Package not found")
        return HttpResponse(status=204)
    return _method_not_allowed()


@api_view
def package_upload(request: HttpRequest, guid: str) -> HttpResponse:
    if request.method != "POST":
        return _method_not_allowed()
    bits_path = _stage_bits(request, _request_params(request))
    message = PackageUploadMessage(guid, {"bits_path": bits_path})
    try:
        package = PackagesHandler(settings.CC_CONFIG).upload(message, request.access_context)
    except (CloudControllerError, JobEnqueueError):
        _discard(bits_path)
        raise
    return JsonResponse(PackagePresenter().to_payload(package), status=201)


@api_view
def app_detail(request: HttpRequest, guid: str) -> HttpResponse:
    if request.method == "GET":
        app = AppFetcher(request.access_context).fetch(guid)
        if app is None:
            return _not_found("App not found")
        return JsonResponse(AppPresenter().to_payload(app))
    if request.method == "DELETE":
        if AppFetcher(request.access_context).fetch(guid) is None:
            return _not_found("App not found")
        AppDelete(request.access_context).delete(guid)
        return HttpResponse(status=204)
    return _method_not_allowed()


@api_view
def droplet_detail(request: HttpRequest, guid: str) -> HttpResponse:
    handler = DropletsHandler()
    if request.method == "GET":
        try:
            droplet = handler.show(guid, request.access_context)
        except Unauthorized:
            droplet = None
        if droplet is None:
            return _not_found("Droplet not found")
        return JsonResponse(DropletPresenter().to_payload(droplet))
    if request.method == "DELETE":
        droplet = handler.delete(guid, request.access_context)
        if droplet is None:
            return _not_found("Droplet not found")
        return HttpResponse(status=204)
    return _method_not_allowed()


def _bulk_credentials_ok(request: HttpRequest) -> bool:
    expected_password = settings.CC_BULK_API_PASSWORD
    if not expected_password:
        return False
    header = request.headers.get("Authorization", "")
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != "basic":
        return False
    try:
        decoded = base64.b64decode(parts[1]).decode("utf-8")
    except (ValueError, UnicodeDecodeError):
        return False
    user, _, password = decoded.partition(":")
    user_ok = hmac.compare_digest(user.encode("utf-8"), settings.CC_BULK_API_USER.encode("utf-8"))
    password_ok = hmac.compare_digest(password.encode("utf-8"), expected_password.encode("utf-8"))
    return user_ok and password_ok


@csrf_exempt
def syslog_drain_urls(request: HttpRequest) -> HttpResponse:
    if not _bulk_credentials_ok(request):
        response = _error("CF-NotAuthenticated", "Authentication error", 401)
        response["WWW-Authenticate"] = 'Basic realm="bulk"'
        return response
    if request.method != "GET":
        return _method_not_allowed()
    try:
        batch_size = int(request.GET.get("batch_size", settings.CC_DEFAULT_BATCH_SIZE))
        next_id = int(request.GET.get("next_id") or 0)
    except ValueError:
        return _error("CF-BadQueryParameter", "batch_size and next_id must be integers", 400)
    if batch_size < 1:
        return _error("CF-BadQueryParameter", "batch_size must be positive", 400)
    batch_size = min(batch_size, settings.CC_MAX_BATCH_SIZE)
    page = SyslogDrainUrlsQuery(batch_size, next_id).fetch()
    return JsonResponse(page.as_payload())
