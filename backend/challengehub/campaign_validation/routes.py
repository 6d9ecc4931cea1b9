from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from challengehub.auth.schemas import Identity
from challengehub.auth.utils.security import get_current_identity, require_manager
from challengehub.campaign_validation.schemas import (
    CampaignValidationResponse,
    CampaignValidationUpdate,
    ConditionFulfillmentResponse,
    ConditionFulfillmentUpdate,
    ConditionWithFulfillment,
    DeleteResponse,
    UnlockConditionCreate,
    UnlockConditionResponse,
    UnlockConditionUpdate,
)
from challengehub.campaign_validation.services import (
    create_unlock_conditions,
    delete_unlock_condition,
    get_campaign,
    get_condition_fulfillments,
    get_or_create_standing,
    get_validation,
    list_unlock_conditions,
    list_validations_for_manager,
    set_validation,
    update_condition_fulfillment,
    update_unlock_condition,
)
from challengehub.core.database import get_db
from challengehub.hierarchy.access import ensure_can_view_standing


router = APIRouter(prefix="/campaign-validation", tags=["Campaign Validation"])


@router.get(
    "/my-status/{campaign_id}",
    response_model=CampaignValidationResponse,
    summary="Get my campaign validation status",
)
def get_my_campaign_validation_status(
    campaign_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return get_or_create_standing(db, identity.user_id, campaign_id)


@router.get(
    "/user/{user_id}/campaign/{campaign_id}",
    response_model=CampaignValidationResponse,
    summary="Get a contributor's standing in a campaign",
)
def get_contributor_standing(
    user_id: int,
    campaign_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    ensure_can_view_standing(db, identity.user_id, user_id)
    return get_or_create_standing(db, user_id, campaign_id)


@router.get(
    "/campaign/{campaign_id}",
    response_model=List[CampaignValidationResponse],
    summary="Get campaign validations for all contributors under the caller",
)
def get_campaign_validations(
    campaign_id: int,
    identity: Identity = Depends(require_manager),
    db: Session = Depends(get_db),
):
    return list_validations_for_manager(db, identity.user_id, campaign_id)


@router.put(
    "/user/{user_id}/campaign/{campaign_id}",
    response_model=CampaignValidationResponse,
    summary="Update campaign validation for a specific contributor",
)
def update_campaign_validation(
    user_id: int,
    campaign_id: int,
    payload: CampaignValidationUpdate,
    identity: Identity = Depends(require_manager),
    db: Session = Depends(get_db),
):
    return set_validation(db, identity.user_id, user_id, campaign_id, payload.status, payload.comment)


@router.post(
    "/campaigns/{campaign_id}/conditions",
    response_model=List[UnlockConditionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create unlock conditions for a campaign",
)
def create_campaign_unlock_conditions(
    campaign_id: int,
    conditions: List[UnlockConditionCreate],
    identity: Identity = Depends(require_manager),
    db: Session = Depends(get_db),
):
    return create_unlock_conditions(db, campaign_id, conditions)


@router.get(
    "/campaigns/{campaign_id}/conditions",
    response_model=List[UnlockConditionResponse],
    summary="List the unlock conditions of a campaign",
)
def get_campaign_unlock_conditions(
    campaign_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    get_campaign(db, campaign_id)
    return list_unlock_conditions(db, campaign_id)


@router.put(
    "/conditions/{condition_id}",
    response_model=UnlockConditionResponse,
    summary="Update an unlock condition",
)
def update_campaign_unlock_condition(
    condition_id: int,
    payload: UnlockConditionUpdate,
    identity: Identity = Depends(require_manager),
    db: Session = Depends(get_db),
):
    return update_unlock_condition(db, condition_id, payload)


@router.delete(
    "/conditions/{condition_id}",
    response_model=DeleteResponse,
    summary="Delete an unlock condition",
)
def delete_campaign_unlock_condition(
    condition_id: int,
    identity: Identity = Depends(require_manager),
    db: Session = Depends(get_db),
):
    delete_unlock_condition(db, condition_id)
    return {"message": "Condition deleted successfully"}


@router.get(
    "/{validation_id}/condition-fulfillments",
    response_model=List[ConditionWithFulfillment],
    summary="Unlock conditions of a validation with their fulfillment state",
)
def get_validation_condition_fulfillments(
    validation_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    validation = get_validation(db, validation_id)
    ensure_can_view_standing(db, identity.user_id, validation.user_id)
    return get_condition_fulfillments(db, validation_id)


@router.put(
    "/{validation_id}/conditions/{condition_id}/fulfill",
    response_model=ConditionFulfillmentResponse,
    summary="Mark an unlock condition as fulfilled or not for a validation",
)
def fulfill_validation_condition(
    validation_id: int,
    condition_id: int,
    payload: ConditionFulfillmentUpdate,
    identity: Identity = Depends(require_manager),
    db: Session = Depends(get_db),
):
    return update_condition_fulfillment(db, validation_id, condition_id, payload, identity.user_id)
