from decimal import Decimal
from pydantic import BaseModel, Field as PydanticField


class CampaignStanding(BaseModel):
    total_earnings: Decimal = PydanticField(Decimal("0.00"), description="Complete challenges plus approved bonuses, in euro.")
    completed_challenges: int = PydanticField(0, description="Challenges whose every action the contributor completed.")
    total_challenges: int = PydanticField(0, description="Challenges scheduled in the campaign.")
    completion_percentage: Decimal = PydanticField(Decimal("0.00"), description="completed / total * 100, rounded half-up to 2 places.")
