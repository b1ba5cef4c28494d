from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AssistantCreate(BaseModel):
    site_id: UUID
    name: str = Field(min_length=1, max_length=255)


class AssistantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    site_id: UUID
    name: str
