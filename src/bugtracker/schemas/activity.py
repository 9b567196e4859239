from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel


class ActivityRead(BaseModel):
    id: UUID
    project_id: UUID
    actor_id: UUID
    actor_name: str
    action: str
    entity_type: str
    entity_id: UUID | None
    entity_title: str | None
    details: dict[str, Any]
    created_at: datetime

    model_config = {"from_attributes": True}
