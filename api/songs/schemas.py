"""
Declarative song schemas.

These double as the field allowlist: anything not declared here is dropped
before it reaches SQL.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Upper bound of a PostgreSQL `integer` / `serial` column.
MAX_INT4 = 2_147_483_647


class SongFields(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, max_length=300)
    length: int = Field(..., ge=0, le=MAX_INT4)
    artist: str = Field(..., min_length=1, max_length=300)
    album: str = Field(..., min_length=1, max_length=300)
    genre: str | None = Field(default=None, max_length=100)


class SongCreate(SongFields):
    ownerID: str = Field(..., min_length=1, max_length=200)


class SongReplace(SongFields):
    """
    Replacement body for PUT. Ownership is fixed at creation, so `ownerID`
    is not part of the allowlist.
    """
