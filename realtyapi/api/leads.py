"""
Lead capture routes: sell-your-home requests and buyer questionnaires.
"""
from typing import Any, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_db
from ..schemas.lead import (
    BuyerQuestionnaire,
    BuyerQuestionnaireCreate,
    SellerLead,
    SellerLeadCreate,
)
from ..services import leads as leads_service
from .deps import get_optional_user_id

router = APIRouter(prefix="/api/leads", tags=["leads"])


@router.post(
    "/sell",
    response_model=SellerLead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a sell-your-home request",
    response_description="The stored lead",
)
async def create_seller_lead(
    lead_in: SellerLeadCreate,
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Store a request for a home valuation.

    - **street**, **city**, **state**, **zip**: property address
    - **bedrooms**, **bathrooms**, **square_feet**, **year_built**, **lot_size**: optional facts
    - **name**, **phone**, **email**: contact details; phone needs 10 digits
    """
    return await leads_service.create_seller_lead(db, lead_in)


@router.post(
    "/buyer-questionnaire",
    response_model=BuyerQuestionnaire,
    status_code=status.HTTP_201_CREATED,
    summary="Submit the buyer questionnaire",
)
async def create_buyer_questionnaire(
    answers: BuyerQuestionnaireCreate,
    user_id: Optional[str] = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return await leads_service.create_buyer_questionnaire(db, answers, user_id=user_id)
