"""JSON API over the namespace operations.

Every endpoint acts on the logged-in user's namespace only. Request
bodies are validated field by field here; everything else is decided by
the logic layer, whose typed errors are mapped onto HTTP statuses.
Folder mutations answer with the updated folder and its refreshed
subtree so clients can patch their copy of the tree.
"""

import functools
import json
from collections.abc import Callable
from http import HTTPStatus
from typing import Any, Final

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.http import require_GET, require_http_methods

from cloudnotes.apps.namespace.constants import UNSET, Unset
from cloudnotes.apps.namespace.exceptions import (
    CascadeFailureError,
    ConcurrentMutationError,
    FolderCycleError,
    FolderNotEmptyError,
    NamespaceError,
    NamespaceValidationError,
    NotFoundError,
)
from cloudnotes.apps.namespace.logic.file_operations import (
    create_file,
    delete_file,
    get_file,
    list_files,
    update_file,
)
from cloudnotes.apps.namespace.logic.folder_operations import (
    create_folder,
    delete_folder,
    get_folder,
    get_subtree,
    list_folders,
    update_folder,
)
from cloudnotes.apps.namespace.logic.tree import load_forest
from cloudnotes.apps.namespace.models import Folder
from cloudnotes.apps.namespace.serializers import (
    serialize_file,
    serialize_folder,
    serialize_node,
)

# Checked in order, subclasses first
_ERROR_STATUSES: Final = (
    (CascadeFailureError, HTTPStatus.INTERNAL_SERVER_ERROR, 'cascade_failure'),
    (NamespaceValidationError, HTTPStatus.BAD_REQUEST, 'validation_error'),
    (NotFoundError, HTTPStatus.NOT_FOUND, 'not_found'),
    (FolderNotEmptyError, HTTPStatus.CONFLICT, 'not_empty'),
    (FolderCycleError, HTTPStatus.CONFLICT, 'cycle'),
    (ConcurrentMutationError, HTTPStatus.CONFLICT, 'conflict'),
)

_ROOT_FILTER: Final = 'root'

_View = Callable[..., HttpResponse]


def _error_response(message: str, code: str, status: int) -> JsonResponse:
    return JsonResponse({'error': message, 'code': code}, status=status)


def json_api(view: _View) -> _View:
    """Require a logged-in user and turn namespace errors into JSON.

    Args:
        view: View function taking the request first.

    Returns:
        Wrapped view.
    """
    @functools.wraps(view)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        if not request.user.is_authenticated:
            return _error_response(
                'Authentication required',
                'unauthorized',
                HTTPStatus.UNAUTHORIZED,
            )

        try:
            return view(request, *args, **kwargs)
        except NamespaceError as error:
            for error_type, status, code in _ERROR_STATUSES:
                if isinstance(error, error_type):
                    return _error_response(str(error), code, status)
            raise

    return wrapper


def _read_payload(request: HttpRequest) -> dict[str, Any]:
    try:
        payload = json.loads(request.body or b'{}')
    except (json.JSONDecodeError, UnicodeDecodeError) as error:
        raise NamespaceValidationError('Request body must be JSON') from error

    if not isinstance(payload, dict):
        raise NamespaceValidationError('Request body must be a JSON object')
    return payload


def _read_id(payload: dict[str, Any], key: str) -> int | None | Unset:
    """Read an optional ID field.

    A missing key gives UNSET, an explicit null gives None.
    """
    if key not in payload:
        return UNSET

    value = payload[key]
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise NamespaceValidationError(f'{key} must be an integer or null')
    return value


def _read_text(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key) or ''
    if not isinstance(value, str):
        raise NamespaceValidationError(f'{key} must be a string')
    return value


def _folder_with_subtree(request: HttpRequest, folder: Folder) -> JsonResponse:
    return JsonResponse({
        'data': serialize_folder(folder),
        'subtree': [
            serialize_folder(descendant)
            for descendant in get_subtree(request.user, folder)
        ],
    })


@require_http_methods(['GET', 'POST'])
@json_api
def folder_collection(request: HttpRequest) -> HttpResponse:
    """List all folders, or create one from ``{name, parent_id?}``."""
    if request.method == 'GET':
        return JsonResponse({
            'data': [
                serialize_folder(folder)
                for folder in list_folders(request.user)
            ],
        })

    payload = _read_payload(request)
    parent_id = _read_id(payload, 'parent_id')
    folder = create_folder(
        request.user,
        payload.get('name'),
        None if parent_id is UNSET else parent_id,
    )
    return JsonResponse(
        {'data': serialize_folder(folder)},
        status=HTTPStatus.CREATED,
    )


@require_http_methods(['GET', 'PUT', 'PATCH', 'DELETE'])
@json_api
def folder_detail(request: HttpRequest, folder_id: int) -> HttpResponse:
    """Show, rename/move or delete a folder.

    For updates, an absent ``parent_id`` keeps the current parent while
    ``"parent_id": null`` moves the folder to the root. An optional
    ``expected_path`` makes the update fail with a conflict if the folder
    was renamed or moved since the client last saw it.
    """
    if request.method == 'GET':
        return _folder_with_subtree(request, get_folder(request.user, folder_id))

    if request.method == 'DELETE':
        delete_folder(request.user, folder_id)
        return JsonResponse({'success': True})

    payload = _read_payload(request)
    folder = update_folder(
        request.user,
        folder_id,
        name=payload.get('name', UNSET),
        parent_id=_read_id(payload, 'parent_id'),
        expected_path=_read_text(payload, 'expected_path') or None,
    )
    return _folder_with_subtree(request, folder)


@require_http_methods(['GET', 'POST'])
@json_api
def file_collection(request: HttpRequest) -> HttpResponse:
    """List files (``?folder_id=<id>|root&kind=``) or create one."""
    if request.method == 'GET':
        folder_filter = request.GET.get('folder_id')
        if folder_filter is None:
            folder_id: int | None | Unset = UNSET
        elif folder_filter == _ROOT_FILTER:
            folder_id = None
        elif folder_filter.isdecimal():
            folder_id = int(folder_filter)
        else:
            raise NamespaceValidationError(
                'folder_id must be an integer or "root"',
            )

        files = list_files(
            request.user,
            folder_id=folder_id,
            kind=request.GET.get('kind'),
        )
        return JsonResponse({
            'data': [serialize_file(file_instance) for file_instance in files],
        })

    payload = _read_payload(request)
    folder_id = _read_id(payload, 'folder_id')
    file_instance = create_file(
        request.user,
        payload.get('name'),
        folder_id=None if folder_id is UNSET else folder_id,
        kind=payload.get('kind'),
        size_bytes=payload.get('size_bytes', 0),
        mime_type=_read_text(payload, 'mime_type'),
    )
    return JsonResponse(
        {'data': serialize_file(file_instance)},
        status=HTTPStatus.CREATED,
    )


@require_http_methods(['GET', 'PUT', 'PATCH', 'DELETE'])
@json_api
def file_detail(request: HttpRequest, file_id: int) -> HttpResponse:
    """Show, rename/move or delete a file."""
    if request.method == 'GET':
        return JsonResponse({
            'data': serialize_file(get_file(request.user, file_id)),
        })

    if request.method == 'DELETE':
        delete_file(request.user, file_id)
        return JsonResponse({'success': True})

    payload = _read_payload(request)
    file_instance = update_file(
        request.user,
        file_id,
        name=payload.get('name', UNSET),
        folder_id=_read_id(payload, 'folder_id'),
    )
    return JsonResponse({'data': serialize_file(file_instance)})


@require_GET
@json_api
def tree(request: HttpRequest) -> HttpResponse:
    """Whole namespace as a nested forest, filtered by ``?q=``."""
    forest = load_forest(request.user, request.GET.get('q', ''))
    return JsonResponse({
        'data': [serialize_node(node) for node in forest],
    })
