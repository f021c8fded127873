"""
Session context.

The anonymous per-device session token, passed explicitly to every
service call that scopes data by owner.

Dependencies: pydantic
System role: Explicit request identity
"""

from pydantic import BaseModel, ConfigDict, Field


class SessionContext(BaseModel):
    """Identity of the calling device."""

    model_config = ConfigDict(frozen=True)

    session_id: str = Field(min_length=1, max_length=255)
