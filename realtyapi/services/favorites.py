"""
Favorites service: per-user sets of favorited property ids.
"""
import logging
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError as SAIntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.exceptions import IntegrityError
from ..db.models import Favorite

logger = logging.getLogger(__name__)


async def list_favorites(db: AsyncSession, user_id: str) -> List[str]:
    """Get the property ids a user has favorited, oldest first."""
    result = await db.execute(
        select(Favorite.property_id)
        .filter(Favorite.user_id == user_id)
        .order_by(Favorite.id)
    )
    return list(result.scalars().all())


async def is_favorite(db: AsyncSession, user_id: str, property_id: str) -> bool:
    result = await db.execute(
        select(Favorite.id).filter(
            Favorite.user_id == user_id,
            Favorite.property_id == property_id,
        )
    )
    return result.scalar_one_or_none() is not None


async def toggle_favorite(db: AsyncSession, user_id: str, property_id: str) -> List[str]:
    """Add the property to the user's favorites, or remove it if already there.

    Returns:
        The user's updated list of favorite property ids.
    """
    if await is_favorite(db, user_id, property_id):
        await db.execute(
            delete(Favorite).where(
                Favorite.user_id == user_id,
                Favorite.property_id == property_id,
            )
        )
        logger.info(f"Removed favorite {property_id} for user {user_id}")
    else:
        db.add(Favorite(user_id=user_id, property_id=property_id))
        try:
            await db.flush()
        except SAIntegrityError as e:
            await db.rollback()
            raise IntegrityError(
                "Favorite already exists",
                context={"user_id": user_id, "property_id": property_id},
                original_exception=e,
            )
        logger.info(f"Added favorite {property_id} for user {user_id}")

    await db.commit()
    return await list_favorites(db, user_id)
