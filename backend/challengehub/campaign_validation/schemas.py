from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field as PydanticField

from challengehub.core.enums.campaigns import ValidationStatus


class CampaignValidationUpdate(BaseModel):
    status: ValidationStatus = PydanticField(..., description="New validation status for the contributor's campaign.")
    comment: Optional[str] = PydanticField(None, max_length=500, description="Optional reviewer comment.")


class CampaignValidationResponse(BaseModel):
    """A contributor's standing in a campaign: validation record merged with earnings."""
    id: int
    user_id: int
    user_name: str
    user_email: str
    campaign_id: int
    campaign_name: str
    status: ValidationStatus
    validated_by: Optional[int] = None
    validated_at: Optional[datetime] = None
    comment: Optional[str] = None
    total_earnings: Decimal
    completed_challenges: int
    total_challenges: int
    completion_percentage: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UnlockConditionCreate(BaseModel):
    description: str = PydanticField(..., min_length=1, max_length=1000)
    display_order: Optional[int] = PydanticField(None, ge=1)


class UnlockConditionUpdate(BaseModel):
    description: Optional[str] = PydanticField(None, min_length=1, max_length=1000)
    display_order: Optional[int] = PydanticField(None, ge=1)


class UnlockConditionResponse(BaseModel):
    id: int
    campaign_id: int
    description: str
    display_order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ConditionFulfillmentUpdate(BaseModel):
    is_fulfilled: bool
    comment: Optional[str] = PydanticField(None, max_length=500)


class ConditionFulfillmentResponse(BaseModel):
    id: int
    validation_id: int
    condition_id: int
    is_fulfilled: bool
    fulfilled_at: Optional[datetime] = None
    fulfilled_by: Optional[int] = None
    comment: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ConditionWithFulfillment(BaseModel):
    condition: UnlockConditionResponse
    fulfillment: Optional[ConditionFulfillmentResponse] = None


class DeleteResponse(BaseModel):
    message: str
