from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from challengehub.core.database import Base
from challengehub.core.enums.campaigns import ValidationStatus


class CampaignValidation(Base):
    __tablename__ = 'campaign_validations'
    __table_args__ = (
        UniqueConstraint("user_id", "campaign_id", name="uq_campaign_validations_user_campaign"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    campaign_id = Column(Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=ValidationStatus.PENDING.value)
    validated_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    validated_at = Column(DateTime, nullable=True)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="campaign_validations", foreign_keys=[user_id])
    campaign = relationship("Campaign", back_populates="validations")
    condition_fulfillments = relationship("CampaignValidationCondition", back_populates="validation")


class CampaignUnlockCondition(Base):
    """Free-text prerequisite a manager must tick off before approving a campaign."""
    __tablename__ = 'campaign_unlock_conditions'

    id = Column(Integer, primary_key=True, index=True)
    campaign_id = Column(Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    display_order = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    campaign = relationship("Campaign", back_populates="unlock_conditions")
    fulfillments = relationship(
        "CampaignValidationCondition", back_populates="condition", cascade="all, delete-orphan"
    )


class CampaignValidationCondition(Base):
    __tablename__ = 'campaign_validation_conditions'
    __table_args__ = (
        UniqueConstraint("validation_id", "condition_id", name="uq_validation_conditions_pair"),
    )

    id = Column(Integer, primary_key=True, index=True)
    validation_id = Column(Integer, ForeignKey("campaign_validations.id", ondelete="CASCADE"), nullable=False)
    condition_id = Column(Integer, ForeignKey("campaign_unlock_conditions.id", ondelete="CASCADE"), nullable=False)
    is_fulfilled = Column(Boolean, nullable=False, default=False)
    fulfilled_at = Column(DateTime, nullable=True)
    fulfilled_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    validation = relationship("CampaignValidation", back_populates="condition_fulfillments")
    condition = relationship("CampaignUnlockCondition", back_populates="fulfillments")
