from pydantic import BaseModel, ConfigDict, Field


class UserBasicResponse(BaseModel):
    """Minimal public identity attached to books and reviews."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="User ID")
    username: str = Field(..., description="Display name")


__all__ = ["UserBasicResponse"]
