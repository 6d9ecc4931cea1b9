from datetime import datetime
from decimal import Decimal
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Date, DateTime, Numeric, ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import relationship

from challengehub.core.database import Base
from challengehub.core.enums.campaigns import CampaignStatus, BonusStatus


class Campaign(Base):
    __tablename__ = 'campaigns'

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(String(50), nullable=False, default=CampaignStatus.DRAFT.value)
    archived = Column(Boolean, nullable=False, default=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    challenges = relationship("Challenge", back_populates="campaign")
    daily_bonuses = relationship("DailyBonus", back_populates="campaign")
    validations = relationship("CampaignValidation", back_populates="campaign")
    unlock_conditions = relationship("CampaignUnlockCondition", back_populates="campaign")


class Challenge(Base):
    __tablename__ = 'challenges'

    id = Column(Integer, primary_key=True, index=True)
    campaign_id = Column(Integer, ForeignKey("campaigns.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    value_in_euro = Column(Numeric(10, 2), nullable=False, default=Decimal("0.50"))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    campaign = relationship("Campaign", back_populates="challenges")
    actions = relationship("Action", back_populates="challenge", order_by="Action.order")


class Action(Base):
    __tablename__ = 'actions'

    id = Column(Integer, primary_key=True, index=True)
    challenge_id = Column(Integer, ForeignKey("challenges.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    type = Column(String(50), nullable=False)
    order = Column(Integer, nullable=False, default=1)  # position in the challenge
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    challenge = relationship("Challenge", back_populates="actions")
    user_actions = relationship("UserAction", back_populates="action")


class UserAction(Base):
    """A contributor's completion of one action."""
    __tablename__ = 'user_actions'
    __table_args__ = (UniqueConstraint("user_id", "action_id", name="uq_user_actions_user_action"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    action_id = Column(Integer, ForeignKey("actions.id"), nullable=False, index=True)
    challenge_id = Column(Integer, ForeignKey("challenges.id"), nullable=False)  # traceability only
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime, nullable=True)
    proof_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="user_actions")
    action = relationship("Action", back_populates="user_actions")
    proofs = relationship("Proof", back_populates="user_action", cascade="all, delete-orphan")


class DailyBonus(Base):
    __tablename__ = 'daily_bonus'

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    campaign_id = Column(Integer, ForeignKey("campaigns.id"), nullable=False, index=True)
    bonus_date = Column(Date, nullable=False)
    bonus_type = Column(String(50), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    proof_url = Column(String(500), nullable=True)
    # Declarations are currently auto-approved when created.
    status = Column(String(50), nullable=False, default=BonusStatus.APPROVED.value)
    reviewed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    review_comment = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="daily_bonuses", foreign_keys=[user_id])
    campaign = relationship("Campaign", back_populates="daily_bonuses")
    proofs = relationship("Proof", back_populates="daily_bonus", cascade="all, delete-orphan")
