from datetime import datetime
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from challengehub.core.database import Base


class Proof(Base):
    """An uploaded evidence file, attached to exactly one user action or one daily bonus."""
    __tablename__ = 'proofs'
    __table_args__ = (
        CheckConstraint(
            "(user_action_id IS NULL) <> (daily_bonus_id IS NULL)",
            name="ck_proofs_single_owner_link",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    url = Column(String(500), nullable=False)
    type = Column(String(50), nullable=False)
    original_name = Column(String(255), nullable=False)
    size = Column(Integer, nullable=False)
    mime_type = Column(String(100), nullable=False)
    user_action_id = Column(Integer, ForeignKey("user_actions.id", ondelete="CASCADE"), nullable=True, index=True)
    daily_bonus_id = Column(Integer, ForeignKey("daily_bonus.id", ondelete="CASCADE"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user_action = relationship("UserAction", back_populates="proofs")
    daily_bonus = relationship("DailyBonus", back_populates="proofs")
