from typing import Optional

from sqlalchemy.orm import Session

from challengehub.campaigns.models import DailyBonus, UserAction
from challengehub.core.exceptions import ForbiddenError
from challengehub.core.logger import logger
from challengehub.hierarchy.services import is_ancestor_manager_of, resolve_contributors
from challengehub.proofs.models import Proof


def can_validate(db: Session, manager_id: int, contributor_id: int) -> bool:
    return contributor_id in resolve_contributors(db, manager_id)


def can_view_standing(db: Session, caller_id: int, contributor_id: int) -> bool:
    return is_ancestor_manager_of(db, caller_id, contributor_id)


def resolve_proof_owner(db: Session, proof: Proof) -> Optional[int]:
    """Owning contributor id of a proof, or None when its link is missing or dangling."""
    if proof.user_action_id is not None:
        row = db.query(UserAction.user_id).filter(UserAction.id == proof.user_action_id).first()
        return row[0] if row else None
    if proof.daily_bonus_id is not None:
        row = db.query(DailyBonus.user_id).filter(DailyBonus.id == proof.daily_bonus_id).first()
        return row[0] if row else None
    return None


def can_access_proof(db: Session, candidate_id: int, proof: Proof) -> bool:
    owner_id = resolve_proof_owner(db, proof)
    if owner_id is None:
        logger.info("access.proof_unlinked", proof_id=proof.id, candidate_id=candidate_id)
        return False
    return is_ancestor_manager_of(db, candidate_id, owner_id)


def ensure_can_validate(db: Session, manager_id: int, contributor_id: int) -> None:
    if not can_validate(db, manager_id, contributor_id):
        logger.info("access.validate_denied", manager_id=manager_id, contributor_id=contributor_id)
        raise ForbiddenError("You do not have permission to validate this contributor")


def ensure_can_view_standing(db: Session, caller_id: int, contributor_id: int) -> None:
    if not can_view_standing(db, caller_id, contributor_id):
        logger.info("access.standing_denied", caller_id=caller_id, contributor_id=contributor_id)
        raise ForbiddenError("You do not have access to this contributor's campaign data")


def ensure_can_access_proof(db: Session, candidate_id: int, proof: Proof) -> None:
    if not can_access_proof(db, candidate_id, proof):
        logger.info("access.proof_denied", proof_id=proof.id, candidate_id=candidate_id)
        raise ForbiddenError("You do not have access to this proof")
