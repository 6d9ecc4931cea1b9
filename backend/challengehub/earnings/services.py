from decimal import Decimal
from typing import Dict, List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from challengehub.auth.models import User
from challengehub.campaigns.models import Action, Campaign, Challenge, DailyBonus, UserAction
from challengehub.core.enums.campaigns import BonusStatus
from challengehub.core.exceptions import NotFoundError
from challengehub.core.helpers import percentage, to_money
from challengehub.earnings.schemas import CampaignStanding


def _campaign_challenges(db: Session, campaign_id: int) -> List[Tuple[int, Decimal]]:
    return (
        db.query(Challenge.id, Challenge.value_in_euro)
        .filter(Challenge.campaign_id == campaign_id)
        .order_by(Challenge.id)
        .all()
    )


def _action_counts(db: Session, campaign_id: int) -> Dict[int, int]:
    rows = (
        db.query(Action.challenge_id, func.count(Action.id))
        .join(Challenge, Challenge.id == Action.challenge_id)
        .filter(Challenge.campaign_id == campaign_id)
        .group_by(Action.challenge_id)
        .all()
    )
    return {challenge_id: count for challenge_id, count in rows}


def _completed_action_counts(db: Session, contributor_id: int, campaign_id: int) -> Dict[int, int]:
    # Challenge membership comes from the action itself, not the denormalized
    # user_actions.challenge_id.
    rows = (
        db.query(Action.challenge_id, func.count(func.distinct(UserAction.action_id)))
        .join(UserAction, UserAction.action_id == Action.id)
        .join(Challenge, Challenge.id == Action.challenge_id)
        .filter(
            Challenge.campaign_id == campaign_id,
            UserAction.user_id == contributor_id,
            UserAction.completed.is_(True),
        )
        .group_by(Action.challenge_id)
        .all()
    )
    return {challenge_id: count for challenge_id, count in rows}


def _approved_bonus_total(db: Session, contributor_id: int, campaign_id: int) -> Decimal:
    amounts = (
        db.query(DailyBonus.amount)
        .filter(
            DailyBonus.user_id == contributor_id,
            DailyBonus.campaign_id == campaign_id,
            DailyBonus.status == BonusStatus.APPROVED.value,
        )
        .all()
    )
    return sum((to_money(amount) for (amount,) in amounts), Decimal("0.00"))


def compute_campaign_standing(db: Session, contributor_id: int, campaign_id: int) -> CampaignStanding:
    """
    Aggregate completion and earnings for one contributor in one campaign.

    A challenge counts as complete only if it has at least one action and the
    contributor completed every one of them. Earnings are the euro value of
    complete challenges plus approved daily bonuses, summed as Decimal.
    Read-only; a contributor with no activity gets an all-zero standing.
    """
    if db.query(Campaign.id).filter(Campaign.id == campaign_id).first() is None:
        raise NotFoundError(f"Campaign {campaign_id} not found")
    if db.query(User.id).filter(User.id == contributor_id).first() is None:
        raise NotFoundError(f"User {contributor_id} not found")

    challenges = _campaign_challenges(db, campaign_id)
    action_counts = _action_counts(db, campaign_id)
    completed_counts = _completed_action_counts(db, contributor_id, campaign_id)

    completed_challenges = 0
    challenge_earnings = Decimal("0.00")
    for challenge_id, value_in_euro in challenges:
        required = action_counts.get(challenge_id, 0)
        if required == 0:
            continue
        if completed_counts.get(challenge_id, 0) >= required:
            completed_challenges += 1
            challenge_earnings += to_money(value_in_euro)

    bonus_earnings = _approved_bonus_total(db, contributor_id, campaign_id)
    total_challenges = len(challenges)

    return CampaignStanding(
        total_earnings=to_money(challenge_earnings + bonus_earnings),
        completed_challenges=completed_challenges,
        total_challenges=total_challenges,
        completion_percentage=percentage(completed_challenges, total_challenges),
    )
