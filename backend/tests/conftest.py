from datetime import date, datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from challengehub.main import app
from challengehub.auth.models import User
from challengehub.campaigns.models import Action, Campaign, Challenge, DailyBonus, UserAction
from challengehub.core.database import Base, get_db
from challengehub.core.enums.campaigns import ActionType, BonusStatus, BonusType, ProofType
from challengehub.core.enums.user_types import UserRole
from challengehub.proofs.models import Proof
from challengehub.storage.s3 import EvidenceStore, get_evidence_store

# 1) Configure in-memory SQLite, one connection shared with the app's threadpool
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=engine
)


# 2) Fresh tables for every test
@pytest.fixture(autouse=True)
def prepare_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


# 3) Stand-in for the S3 client behind EvidenceStore
class FakeS3Client:
    def __init__(self):
        self.deleted = []

    def generate_presigned_url(self, operation, Params, ExpiresIn):
        return f"https://signed.example.com/{Params['Bucket']}/{Params['Key']}?expires={ExpiresIn}"

    def delete_object(self, Bucket, Key):
        self.deleted.append((Bucket, Key))


@pytest.fixture
def evidence_store():
    return EvidenceStore(bucket_name="proofs", client=FakeS3Client())


# 4) Override the dependencies and hand out a TestClient
@pytest.fixture
def client(evidence_store):
    def _get_test_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_evidence_store] = lambda: evidence_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user, role=None):
        return {"X-User-Id": str(user.id), "X-User-Role": role or user.role.value}
    return _headers


class Factory:
    """Creates committed rows with sensible defaults."""

    def __init__(self, db):
        self.db = db
        self._seq = 0

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def user(self, role=UserRole.CONTRIBUTOR, manager=None, name=None):
        self._seq += 1
        name = name or f"{role.value}-{self._seq}"
        return self._save(User(
            name=name,
            email=f"{name}-{self._seq}@example.com",
            role=role,
            manager_id=manager.id if manager else None,
        ))

    def top(self, **kwargs):
        return self.user(UserRole.TOP, **kwargs)

    def manager(self, manager=None, **kwargs):
        return self.user(UserRole.MANAGER, manager=manager, **kwargs)

    def contributor(self, manager=None, **kwargs):
        return self.user(UserRole.CONTRIBUTOR, manager=manager, **kwargs)

    def campaign(self, name="Spring push"):
        return self._save(Campaign(
            name=name,
            start_date=date(2026, 3, 1),
            end_date=date(2026, 3, 31),
            status="active",
        ))

    def challenge(self, campaign, value="1.00", actions=2, day=1):
        challenge = self._save(Challenge(
            campaign_id=campaign.id,
            date=date(2026, 3, day),
            title=f"Day {day}",
            value_in_euro=Decimal(value),
        ))
        created = [
            self._save(Action(
                challenge_id=challenge.id,
                title=f"Action {i + 1}",
                type=ActionType.VENTE.value,
                order=i + 1,
            ))
            for i in range(actions)
        ]
        return challenge, created

    def complete(self, user, action, completed=True):
        return self._save(UserAction(
            user_id=user.id,
            action_id=action.id,
            challenge_id=action.challenge_id,
            completed=completed,
            completed_at=datetime.utcnow() if completed else None,
        ))

    def bonus(self, user, campaign, amount="5.00", status=BonusStatus.APPROVED):
        return self._save(DailyBonus(
            user_id=user.id,
            campaign_id=campaign.id,
            bonus_date=date(2026, 3, 2),
            bonus_type=BonusType.BASKET.value,
            amount=Decimal(amount),
            status=status.value,
        ))

    def proof(self, user_action=None, daily_bonus=None, url="https://s3.example.com/proofs/user-actions/1/photo.jpg"):
        return self._save(Proof(
            url=url,
            type=ProofType.IMAGE.value,
            original_name="photo.jpg",
            size=1024,
            mime_type="image/jpeg",
            user_action_id=user_action.id if user_action else None,
            daily_bonus_id=daily_bonus.id if daily_bonus else None,
        ))


@pytest.fixture
def factory(db):
    return Factory(db)
