"""
Favorites routes. The user is identified by the ``X-User-Id`` header set by
the auth gateway.
"""
from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import IntegrityError, get_db
from ..schemas.favorite import FavoritesList, FavoriteStatus, FavoriteToggleResult
from ..services import favorites as favorites_service
from .deps import get_current_user_id

router = APIRouter(prefix="/api/favorites", tags=["favorites"])


@router.get("", response_model=FavoritesList, summary="List the user's favorite properties")
async def list_favorites(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> FavoritesList:
    favorites = await favorites_service.list_favorites(db, user_id)
    return FavoritesList(favorites=favorites)


@router.get("/{property_id}", response_model=FavoriteStatus, summary="Check whether a property is a favorite")
async def get_favorite(
    property_id: str = Path(..., min_length=1, max_length=64),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> FavoriteStatus:
    is_favorite = await favorites_service.is_favorite(db, user_id, property_id)
    return FavoriteStatus(property_id=property_id, is_favorite=is_favorite)


@router.post(
    "/{property_id}/toggle",
    response_model=FavoriteToggleResult,
    summary="Add or remove a favorite",
    response_description="The new favorite status and the updated list",
)
async def toggle_favorite(
    property_id: str = Path(..., min_length=1, max_length=64),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> FavoriteToggleResult:
    """
    Toggle a property in the user's favorites.

    A second toggle of the same property removes it again.
    """
    try:
        favorites = await favorites_service.toggle_favorite(db, user_id, property_id)
    except IntegrityError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return FavoriteToggleResult(
        property_id=property_id,
        is_favorite=property_id in favorites,
        favorites=favorites,
    )
