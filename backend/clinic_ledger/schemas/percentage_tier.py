from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class PercentageTierCreate(BaseModel):
    id: int = Field(ge=1)
    fraction: Decimal = Field(ge=0, le=1)
    description: str | None = Field(default=None, max_length=255)


class PercentageTierResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    fraction: Decimal
    description: str | None = None
