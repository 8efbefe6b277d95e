from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SYSTEM_STATUS_HEALTHY = "Healthy"


class StatsSnapshot(BaseModel):
    """Point-in-time dashboard statistics. Lives only in the cache."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    events_count: int = Field(ge=0, description="Rows in the event log")
    system_status: Literal["Healthy"] = SYSTEM_STATUS_HEALTHY
    last_updated: datetime = Field(description="When the snapshot was computed")
