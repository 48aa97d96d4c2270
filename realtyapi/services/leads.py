"""
Lead capture service for seller leads and buyer questionnaires.
"""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.models import BuyerQuestionnaire, SellerLead
from ..schemas.lead import BuyerQuestionnaireCreate, SellerLeadCreate

logger = logging.getLogger(__name__)


async def create_seller_lead(db: AsyncSession, lead_in: SellerLeadCreate) -> SellerLead:
    """Store a sell-your-home submission."""
    lead = SellerLead(**lead_in.model_dump())
    db.add(lead)
    await db.commit()
    await db.refresh(lead)
    logger.info(f"Seller lead {lead.id} stored for {lead.city}, {lead.state}")
    return lead


async def create_buyer_questionnaire(
    db: AsyncSession,
    answers: BuyerQuestionnaireCreate,
    user_id: Optional[str] = None,
) -> BuyerQuestionnaire:
    """Store the buyer questionnaire, attributed to ``user_id`` when known."""
    record = BuyerQuestionnaire(user_id=user_id, **answers.model_dump())
    db.add(record)
    await db.commit()
    await db.refresh(record)
    logger.info(f"Buyer questionnaire {record.id} stored (user: {user_id or 'anonymous'})")
    return record


async def list_seller_leads(db: AsyncSession, limit: int = 20) -> List[SellerLead]:
    """Most recent seller leads first."""
    result = await db.execute(
        select(SellerLead).order_by(SellerLead.id.desc()).limit(limit)
    )
    return list(result.scalars().all())
