"""Product edit session endpoints — create/edit a product with its variants, suppliers and images."""

from typing import Any, Literal

from fastapi import APIRouter, Body, Depends, File, HTTPException, Query, UploadFile, status
from pydantic.alias_generators import to_snake

from product_console.application.schemas.product_session import (
    EditorOpenRequest,
    SessionCreateRequest,
    SessionResponse,
)
from product_console.application.services import (
    EditSessionRegistry,
    ProductEditSession,
    ProductEditSessionFactory,
)
from product_console.domain.entities import SelectedFile
from product_console.domain.exceptions import (
    ChildIndexError,
    EditorBusyError,
    EditorNotOpenError,
    EntityNotFoundError,
    ReferenceDataError,
)
from product_console.infrastructure.dependencies import get_session_factory, get_session_registry

router = APIRouter(prefix="/product-sessions", tags=["Product Sessions"])

Collection = Literal["variants", "suppliers"]


def _view(session: ProductEditSession) -> SessionResponse:
    return SessionResponse(**session.snapshot())


def _snake_keys(values: dict[str, Any]) -> dict[str, Any]:
    """Accept camelCase or snake_case field names from the client."""
    return {to_snake(key): value for key, value in values.items()}


def _get_session(
    session_id: str,
    registry: EditSessionRegistry = Depends(get_session_registry),
) -> ProductEditSession:
    try:
        return registry.get(session_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _raise_for(exc: Exception) -> None:
    """Translate a domain error into the matching HTTP error."""
    if isinstance(exc, ReferenceDataError):
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    if isinstance(exc, (EntityNotFoundError, ChildIndexError)):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, (EditorBusyError, EditorNotOpenError)):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, ValueError):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    raise exc


_DOMAIN_ERRORS = (
    ReferenceDataError,
    EntityNotFoundError,
    ChildIndexError,
    EditorBusyError,
    EditorNotOpenError,
    ValueError,
)


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def start_session(
    data: SessionCreateRequest | None = None,
    factory: ProductEditSessionFactory = Depends(get_session_factory),
    registry: EditSessionRegistry = Depends(get_session_registry),
) -> SessionResponse:
    """Open an edit session for an existing product, or a create session without ``productId``."""
    try:
        session = await factory.start(data.product_id if data else None)
    except _DOMAIN_ERRORS as e:
        _raise_for(e)
    registry.add(session)
    return _view(session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session: ProductEditSession = Depends(_get_session)) -> SessionResponse:
    """Current session state, including notifications raised since the last call."""
    return _view(session)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def abandon_session(
    session_id: str,
    registry: EditSessionRegistry = Depends(get_session_registry),
) -> None:
    """Leave the screen: drop pending uploads and open editors without saving."""
    try:
        registry.close(session_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.patch("/{session_id}/fields", response_model=SessionResponse)
async def update_fields(
    values: dict[str, Any] = Body(...),
    session: ProductEditSession = Depends(_get_session),
) -> SessionResponse:
    """Set top-level product fields."""
    try:
        session.update_fields(**_snake_keys(values))
    except _DOMAIN_ERRORS as e:
        _raise_for(e)
    return _view(session)


# ── Child editors ───────────────────────────────────────────────────


@router.post("/{session_id}/{collection}/editor", response_model=SessionResponse)
async def open_editor(
    collection: Collection,
    data: EditorOpenRequest | None = None,
    session: ProductEditSession = Depends(_get_session),
) -> SessionResponse:
    """Open the editor for a new record, or for the record at ``index``."""
    try:
        session.open_child_editor(data.index if data else None, collection)
    except _DOMAIN_ERRORS as e:
        _raise_for(e)
    return _view(session)


@router.post("/{session_id}/{collection}/editor/commit", response_model=SessionResponse)
async def commit_editor(
    collection: Collection,
    values: dict[str, Any] | None = Body(None),
    session: ProductEditSession = Depends(_get_session),
) -> SessionResponse:
    """Commit the open editor. Validation errors keep it open and show up under ``editors``."""
    try:
        session.commit_child(_snake_keys(values) if values else None, collection)
    except _DOMAIN_ERRORS as e:
        _raise_for(e)
    return _view(session)


@router.delete("/{session_id}/{collection}/editor", response_model=SessionResponse)
async def discard_editor(
    collection: Collection,
    session: ProductEditSession = Depends(_get_session),
) -> SessionResponse:
    """Close the editor without touching the collection."""
    session.discard_child(collection)
    return _view(session)


@router.delete("/{session_id}/{collection}/{index}", response_model=SessionResponse)
async def remove_child(
    collection: Collection,
    index: int,
    session: ProductEditSession = Depends(_get_session),
) -> SessionResponse:
    """Remove a record locally; the removal is persisted on save."""
    try:
        session.remove_child(index, collection)
    except _DOMAIN_ERRORS as e:
        _raise_for(e)
    return _view(session)


# ── Media ───────────────────────────────────────────────────────────


@router.post("/{session_id}/media", response_model=SessionResponse)
async def upload_media(
    files: list[UploadFile] = File(...),
    session: ProductEditSession = Depends(_get_session),
) -> SessionResponse:
    """Upload images and append the stored URLs to the product."""
    # one byte past the limit is enough for the size check to reject the file
    read_limit = session.max_upload_size_bytes + 1
    selected = [
        SelectedFile(
            filename=f.filename or "upload",
            content=await f.read(read_limit),
            content_type=f.content_type or "application/octet-stream",
        )
        for f in files
    ]
    try:
        await session.upload_files(selected)
    except _DOMAIN_ERRORS as e:
        _raise_for(e)
    return _view(session)


@router.delete("/{session_id}/media", response_model=SessionResponse)
async def remove_media(
    url: str = Query(..., min_length=1),
    session: ProductEditSession = Depends(_get_session),
) -> SessionResponse:
    """Remove an image URL from the product; persisted on save."""
    if not session.remove_media(url):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Image '{url}' not found")
    return _view(session)


# ── Save ────────────────────────────────────────────────────────────


@router.post("/{session_id}/save", response_model=SessionResponse)
async def save(session: ProductEditSession = Depends(_get_session)) -> SessionResponse:
    """Validate and persist the product. Field and general errors are reported in the view."""
    try:
        outcome = await session.save()
    except _DOMAIN_ERRORS as e:
        _raise_for(e)
    if outcome is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A save is already in progress")
    return _view(session)
