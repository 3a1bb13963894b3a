from pydantic import BaseModel
from typing import Optional

class User(BaseModel):
    """Authenticated caller. ``id`` is the users table key progress records hang off."""
    id: int
    email: str
    preferences: Optional[dict] = None


class MeResponse(BaseModel):
    id: int
    email: str
    display_name: str
    preferences: Optional[dict] = None
