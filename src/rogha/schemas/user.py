"""User-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict


class UserSummary(BaseModel):
    """Public projection of a user."""

    id: str
    display_name: str | None = None

    model_config = ConfigDict(from_attributes=True)
