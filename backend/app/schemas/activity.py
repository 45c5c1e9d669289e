from datetime import datetime

from app.schemas.common import CamelModel


class ActivityLogOut(CamelModel):
    id: int
    actor: str | None
    action: str
    entity_type: str | None
    entity_id: str | None
    details: dict
    created_at: datetime | None = None
