"""Bookmark CRUD endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import check_rate_limit, get_async_session, get_current_user
from models.user import User
from schemas.bookmark import BookmarkCreate, BookmarkResponse, BookmarkUpdate
from services import bookmark_service

router = APIRouter(
    prefix="/bookmarks",
    tags=["bookmarks"],
    dependencies=[Depends(check_rate_limit)],
)


# Bounds of the Postgres INTEGER id column and BIGINT OFFSET
MAX_BOOKMARK_ID = 2**31 - 1
MAX_OFFSET = 2**63 - 1


def _not_found() -> HTTPException:
    # Other users' bookmarks are reported as missing, not forbidden, to avoid leaking ids
    return HTTPException(status_code=404, detail="Bookmark not found")


@router.post("", response_model=BookmarkResponse, status_code=201)
async def create_bookmark(
    data: BookmarkCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Create a new bookmark."""
    bookmark = await bookmark_service.create_bookmark(db, current_user.id, data)
    return BookmarkResponse.model_validate(bookmark)


@router.get("", response_model=list[BookmarkResponse])
async def list_bookmarks(
    offset: int = Query(default=0, ge=0, le=MAX_OFFSET),
    limit: int = Query(default=50, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> list[BookmarkResponse]:
    """List the current user's bookmarks, newest first."""
    bookmarks = await bookmark_service.get_bookmarks(db, current_user.id, offset, limit)
    return [BookmarkResponse.model_validate(b) for b in bookmarks]


@router.get("/{bookmark_id}", response_model=BookmarkResponse)
async def get_bookmark(
    bookmark_id: int = Path(ge=1, le=MAX_BOOKMARK_ID),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Get a single bookmark by ID."""
    bookmark = await bookmark_service.get_bookmark(db, current_user.id, bookmark_id)
    if bookmark is None:
        raise _not_found()
    return BookmarkResponse.model_validate(bookmark)


@router.patch("/{bookmark_id}", response_model=BookmarkResponse)
async def update_bookmark(
    data: BookmarkUpdate,
    bookmark_id: int = Path(ge=1, le=MAX_BOOKMARK_ID),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Update a bookmark with the supplied fields."""
    bookmark = await bookmark_service.update_bookmark(
        db, current_user.id, bookmark_id, data,
    )
    if bookmark is None:
        raise _not_found()
    return BookmarkResponse.model_validate(bookmark)


@router.delete("/{bookmark_id}", response_model=BookmarkResponse)
async def delete_bookmark(
    bookmark_id: int = Path(ge=1, le=MAX_BOOKMARK_ID),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Delete a bookmark and return the removed record."""
    bookmark = await bookmark_service.delete_bookmark(db, current_user.id, bookmark_id)
    if bookmark is None:
        raise _not_found()
    return BookmarkResponse.model_validate(bookmark)
