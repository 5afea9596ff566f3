# === backend/app/schemas/auth.py ===
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from app.schemas.common import RoleName

class SignupRequest(BaseModel):
    email: str = Field(min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    full_name: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=6)

class LoginRequest(BaseModel):
    email: str
    password: str

class CreateUserRequest(SignupRequest):
    role: RoleName = "developer"

class RoleUpdateRequest(BaseModel):
    role: RoleName

class UserResponse(BaseModel):
    id: int
    email: str
    full_name: str
    is_active: bool
    picture: Optional[str] = None
    created_at: Optional[datetime] = None
    roles: List[str] = []

class LoginResponse(BaseModel):
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
