"""
Campaign validation state machine.

One CampaignValidation row per (contributor, campaign), created lazily as
``pending`` the first time anyone reads it. Managers move it between
``pending``, ``approved`` and ``rejected`` freely; approving additionally
requires every unlock condition of the campaign to be fulfilled.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from challengehub.auth.models import User
from challengehub.campaign_validation.models import (
    CampaignUnlockCondition,
    CampaignValidation,
    CampaignValidationCondition,
)
from challengehub.campaign_validation.schemas import (
    CampaignValidationResponse,
    ConditionFulfillmentUpdate,
    UnlockConditionCreate,
    UnlockConditionUpdate,
)
from challengehub.campaigns.models import Campaign
from challengehub.core.enums.campaigns import ValidationStatus
from challengehub.core.exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationError
from challengehub.core.logger import logger
from challengehub.earnings.services import compute_campaign_standing
from challengehub.hierarchy.access import ensure_can_validate
from challengehub.hierarchy.services import resolve_contributors


def get_campaign(db: Session, campaign_id: int) -> Campaign:
    campaign = db.query(Campaign).filter(Campaign.id == campaign_id).first()
    if not campaign:
        raise NotFoundError(f"Campaign {campaign_id} not found")
    return campaign


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError(f"User {user_id} not found")
    return user


def find_validation(db: Session, contributor_id: int, campaign_id: int) -> Optional[CampaignValidation]:
    return (
        db.query(CampaignValidation)
        .filter(
            CampaignValidation.user_id == contributor_id,
            CampaignValidation.campaign_id == campaign_id,
        )
        .first()
    )


def get_validation(db: Session, validation_id: int) -> CampaignValidation:
    validation = db.query(CampaignValidation).filter(CampaignValidation.id == validation_id).first()
    if not validation:
        raise NotFoundError(f"Validation {validation_id} not found")
    return validation


def get_or_create_validation(db: Session, contributor_id: int, campaign_id: int) -> CampaignValidation:
    """
    Read-or-initialize the validation row. Writes a ``pending`` row when none exists.

    Must run before any other pending change in the session: losing a
    concurrent first-create race rolls the session back, after which the
    row committed by the other request is fetched and returned.
    """
    validation = find_validation(db, contributor_id, campaign_id)
    if validation is not None:
        return validation

    validation = CampaignValidation(
        user_id=contributor_id,
        campaign_id=campaign_id,
        status=ValidationStatus.PENDING.value,
    )
    db.add(validation)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("validation.create_race_lost", user_id=contributor_id, campaign_id=campaign_id)
        validation = find_validation(db, contributor_id, campaign_id)
        if validation is None:
            raise ConflictError(
                f"Could not create validation for user {contributor_id} in campaign {campaign_id}"
            )
        return validation

    db.refresh(validation)
    logger.info("validation.created", validation_id=validation.id, user_id=contributor_id, campaign_id=campaign_id)
    return validation


def serialize_standing(db: Session, validation: CampaignValidation, user: User, campaign: Campaign) -> CampaignValidationResponse:
    standing = compute_campaign_standing(db, user.id, campaign.id)
    return CampaignValidationResponse(
        id=validation.id,
        user_id=user.id,
        user_name=user.name,
        user_email=user.email,
        campaign_id=campaign.id,
        campaign_name=campaign.name,
        status=validation.status,
        validated_by=validation.validated_by,
        validated_at=validation.validated_at,
        comment=validation.comment,
        total_earnings=standing.total_earnings,
        completed_challenges=standing.completed_challenges,
        total_challenges=standing.total_challenges,
        completion_percentage=standing.completion_percentage,
        created_at=validation.created_at,
        updated_at=validation.updated_at,
    )


def get_or_create_standing(db: Session, contributor_id: int, campaign_id: int) -> CampaignValidationResponse:
    user = get_user(db, contributor_id)
    campaign = get_campaign(db, campaign_id)
    validation = get_or_create_validation(db, contributor_id, campaign_id)
    return serialize_standing(db, validation, user, campaign)


def list_validations_for_manager(db: Session, manager_id: int, campaign_id: int) -> List[CampaignValidationResponse]:
    """Standing of every contributor under `manager_id`, ordered by user id."""
    get_campaign(db, campaign_id)
    contributor_ids = sorted(resolve_contributors(db, manager_id))
    return [get_or_create_standing(db, contributor_id, campaign_id) for contributor_id in contributor_ids]


def set_validation(
    db: Session,
    manager_id: int,
    contributor_id: int,
    campaign_id: int,
    status,
    comment: Optional[str] = None,
) -> CampaignValidationResponse:
    """
    Apply a manager's decision to a contributor's campaign.

    Non-pending statuses stamp the reviewer and time; going back to
    ``pending`` clears both. Concurrent decisions are last-write-wins.
    """
    try:
        status = ValidationStatus(status)
    except ValueError:
        raise InvalidStateError(f"Unknown validation status: {status!r}") from None

    ensure_can_validate(db, manager_id, contributor_id)
    campaign = get_campaign(db, campaign_id)
    user = get_user(db, contributor_id)

    validation = get_or_create_validation(db, contributor_id, campaign_id)

    if status == ValidationStatus.APPROVED and not check_all_conditions_fulfilled(db, validation.id):
        raise ValidationError("Cannot approve validation: all unlock conditions must be fulfilled")

    validation.status = status.value
    if status == ValidationStatus.PENDING:
        validation.validated_by = None
        validation.validated_at = None
    else:
        validation.validated_by = manager_id
        validation.validated_at = datetime.utcnow()
    validation.comment = comment
    db.commit()
    db.refresh(validation)

    logger.info(
        "validation.updated",
        validation_id=validation.id,
        user_id=contributor_id,
        campaign_id=campaign_id,
        status=status.value,
        by=manager_id,
    )
    return serialize_standing(db, validation, user, campaign)


# --- Unlock conditions ---------------------------------------------------------


def create_unlock_conditions(
    db: Session, campaign_id: int, conditions: List[UnlockConditionCreate]
) -> List[CampaignUnlockCondition]:
    get_campaign(db, campaign_id)
    created = [
        CampaignUnlockCondition(
            campaign_id=campaign_id,
            description=condition.description,
            display_order=condition.display_order if condition.display_order is not None else index + 1,
        )
        for index, condition in enumerate(conditions)
    ]
    db.add_all(created)
    db.commit()
    for condition in created:
        db.refresh(condition)
    logger.info("unlock_conditions.created", campaign_id=campaign_id, count=len(created))
    return created


def list_unlock_conditions(db: Session, campaign_id: int) -> List[CampaignUnlockCondition]:
    return (
        db.query(CampaignUnlockCondition)
        .filter(CampaignUnlockCondition.campaign_id == campaign_id)
        .order_by(CampaignUnlockCondition.display_order, CampaignUnlockCondition.id)
        .all()
    )


def get_unlock_condition(db: Session, condition_id: int) -> CampaignUnlockCondition:
    condition = db.query(CampaignUnlockCondition).filter(CampaignUnlockCondition.id == condition_id).first()
    if not condition:
        raise NotFoundError(f"Condition {condition_id} not found")
    return condition


def update_unlock_condition(db: Session, condition_id: int, data: UnlockConditionUpdate) -> CampaignUnlockCondition:
    condition = get_unlock_condition(db, condition_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(condition, key, value)
    db.commit()
    db.refresh(condition)
    return condition


def delete_unlock_condition(db: Session, condition_id: int) -> None:
    condition = get_unlock_condition(db, condition_id)
    db.delete(condition)
    db.commit()
    logger.info("unlock_condition.deleted", condition_id=condition_id)


def update_condition_fulfillment(
    db: Session,
    validation_id: int,
    condition_id: int,
    data: ConditionFulfillmentUpdate,
    manager_id: int,
) -> CampaignValidationCondition:
    validation = get_validation(db, validation_id)
    ensure_can_validate(db, manager_id, validation.user_id)

    condition = (
        db.query(CampaignUnlockCondition)
        .filter(
            CampaignUnlockCondition.id == condition_id,
            CampaignUnlockCondition.campaign_id == validation.campaign_id,
        )
        .first()
    )
    if not condition:
        raise NotFoundError("Condition not found or does not belong to this campaign")

    fulfillment = (
        db.query(CampaignValidationCondition)
        .filter(
            CampaignValidationCondition.validation_id == validation_id,
            CampaignValidationCondition.condition_id == condition_id,
        )
        .first()
    )
    if fulfillment is None:
        fulfillment = CampaignValidationCondition(validation_id=validation_id, condition_id=condition_id)
        db.add(fulfillment)

    fulfillment.is_fulfilled = data.is_fulfilled
    fulfillment.fulfilled_at = datetime.utcnow() if data.is_fulfilled else None
    fulfillment.fulfilled_by = manager_id if data.is_fulfilled else None
    fulfillment.comment = data.comment
    db.commit()
    db.refresh(fulfillment)
    return fulfillment


def get_condition_fulfillments(db: Session, validation_id: int) -> List[dict]:
    validation = get_validation(db, validation_id)
    conditions = list_unlock_conditions(db, validation.campaign_id)
    fulfillments = (
        db.query(CampaignValidationCondition)
        .filter(CampaignValidationCondition.validation_id == validation_id)
        .all()
    )
    by_condition = {f.condition_id: f for f in fulfillments}
    return [
        {"condition": condition, "fulfillment": by_condition.get(condition.id)}
        for condition in conditions
    ]


def check_all_conditions_fulfilled(db: Session, validation_id: int) -> bool:
    validation = get_validation(db, validation_id)
    condition_ids = {c.id for c in list_unlock_conditions(db, validation.campaign_id)}
    if not condition_ids:
        return True

    fulfilled_ids = {
        condition_id
        for (condition_id,) in db.query(CampaignValidationCondition.condition_id).filter(
            CampaignValidationCondition.validation_id == validation_id,
            CampaignValidationCondition.is_fulfilled.is_(True),
        )
    }
    return condition_ids <= fulfilled_ids
