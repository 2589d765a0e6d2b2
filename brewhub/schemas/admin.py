from typing import Optional
from pydantic import BaseModel, Field
from brewhub.auth import Role


class CategoryRequest(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    description: Optional[str] = None
    image_url: Optional[str] = None


class RoleChangeRequest(BaseModel):
    role: Role
