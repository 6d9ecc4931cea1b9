import datetime
from sqlalchemy import Column, DateTime, String, ForeignKey, Integer
from sqlalchemy.orm import relationship
from challengehub.core.database import Base
from challengehub.core.enums.user_types import UserRole
from challengehub.core.types import UserRoleType


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role = Column(UserRoleType, nullable=False, default=UserRole.CONTRIBUTOR)
    # "reports to"; never an ownership edge
    manager_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    manager = relationship("User", remote_side=[id], back_populates="team_members")
    team_members = relationship("User", back_populates="manager")
    user_actions = relationship("UserAction", back_populates="user")
    daily_bonuses = relationship("DailyBonus", back_populates="user", foreign_keys="DailyBonus.user_id")
    campaign_validations = relationship(
        "CampaignValidation", back_populates="user", foreign_keys="CampaignValidation.user_id"
    )
