"""
Activity log model.

File: models/activity.py
Created: 2026-01-09
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ConfigDict

ACTIVITY_ACTIONS = ("uploaded", "created", "updated", "deleted", "exported", "marked_sent")


class Activity(BaseModel):
    """A single entry in the activity log."""
    model_config = ConfigDict(extra='ignore')

    id: int = Field(..., description="Row id", gt=0)
    action: str = Field(..., description="One of ACTIVITY_ACTIONS", min_length=1)
    contact_id: Optional[int] = Field(None, description="Contact the action applied to, if any")
    description: str = Field("", description="Human-readable summary")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Extra details (JSON)")
    created_at: datetime = Field(..., description="When the action happened")

    @classmethod
    def from_db_dict(cls, data: Dict[str, Any]) -> "Activity":
        """Create Activity instance from database dictionary"""
        import json

        data = dict(data)
        if isinstance(data.get("metadata"), str):
            data["metadata"] = json.loads(data["metadata"])
        elif data.get("metadata") is None:
            data["metadata"] = {}
        if isinstance(data.get("created_at"), str):
            data["created_at"] = datetime.fromisoformat(data["created_at"])
        return cls(**data)
