"""
Walks the manager graph in both directions.

`resolve_contributors` expands a manager's subtree downward into the set of
contributors under it; `is_ancestor_manager_of` climbs a single path upward
from a record owner. For any contributor C and manager M the two agree:
``is_ancestor_manager_of(db, M, C) == (C in resolve_contributors(db, M))``.

Neither function raises for an empty result. Both stop after
MAX_HIERARCHY_DEPTH hops so a corrupted (cyclic) manager graph cannot hang a
request. Reports whose stored role is not a known label are skipped
by the downward walk.
"""
from collections import defaultdict
from typing import Dict, List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from challengehub.auth.models import User
from challengehub.core.constants import MAX_HIERARCHY_DEPTH
from challengehub.core.enums.user_types import UserRole
from challengehub.core.logger import logger


def load_reports_by_manager(db: Session) -> Dict[int, List[Tuple[int, UserRole]]]:
    """One query for the whole manager -> direct reports adjacency list."""
    rows = (
        db.query(User.id, User.role, User.manager_id)
        .filter(User.manager_id.isnot(None))
        .order_by(User.id)
        .all()
    )
    reports: Dict[int, List[Tuple[int, UserRole]]] = defaultdict(list)
    for user_id, role, manager_id in rows:
        reports[manager_id].append((user_id, role))
    return reports


def resolve_contributors(
    db: Session,
    manager_id: int,
    max_depth: int = MAX_HIERARCHY_DEPTH,
) -> Set[int]:
    """Every contributor transitively reporting to `manager_id`.

    Unknown ids and users without reports yield an empty set.
    """
    reports_by_manager = load_reports_by_manager(db)
    contributors: Set[int] = set()
    visited: Set[int] = {manager_id}

    def collect(current_id: int, depth: int) -> None:
        if depth >= max_depth:
            logger.warning("hierarchy.depth_limit_reached", manager_id=manager_id, at_user_id=current_id, depth=depth)
            return
        for report_id, role in reports_by_manager.get(current_id, ()):
            if role is None:
                logger.warning("hierarchy.unknown_role_skipped", manager_id=manager_id, at_user_id=report_id)
                continue
            if role == UserRole.CONTRIBUTOR:
                contributors.add(report_id)
            elif report_id not in visited:
                visited.add(report_id)
                collect(report_id, depth + 1)
            else:
                logger.warning("hierarchy.cycle_detected", manager_id=manager_id, at_user_id=report_id)

    collect(manager_id, 0)
    return contributors


def _manager_of(db: Session, user_id: int) -> Tuple[bool, Optional[int]]:
    row = db.query(User.manager_id).filter(User.id == user_id).first()
    if row is None:
        return False, None
    return True, row[0]


def is_ancestor_manager_of(
    db: Session,
    candidate_id: int,
    owner_id: int,
    max_depth: int = MAX_HIERARCHY_DEPTH,
) -> bool:
    """True when `candidate_id` is `owner_id` itself or sits anywhere above it.

    Fails closed: an unknown owner, the top of the chain, a cycle or the depth
    bound all answer False.
    """
    if candidate_id == owner_id:
        return True

    seen: Set[int] = {owner_id}
    current_id = owner_id
    for _ in range(max_depth):
        exists, manager_id = _manager_of(db, current_id)
        if not exists or manager_id is None:
            return False
        if manager_id == candidate_id:
            return True
        if manager_id in seen:
            logger.warning("hierarchy.cycle_detected", owner_id=owner_id, at_user_id=manager_id)
            return False
        seen.add(manager_id)
        current_id = manager_id

    logger.warning("hierarchy.depth_limit_reached", owner_id=owner_id, candidate_id=candidate_id, depth=max_depth)
    return False
