from pydantic import BaseModel, EmailStr, ConfigDict, Field, field_validator
from typing import Literal, Optional

# Shared properties for user models
class UserBase(BaseModel):
    email: EmailStr

# Schema for user authentication credentials
class UserLogin(UserBase):
    password: str

# Schema for user registration requests; the role is always assigned server-side
class UserCreate(UserBase):
    password: str = Field(min_length=6, max_length=72)
    full_name: Optional[str] = None

    # bcrypt only accepts up to 72 bytes of input
    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password must be at most 72 bytes")
        return v

# Output schema for user profile details
class UserResponse(UserBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    role: str
    full_name: Optional[str] = None

# Schema for JWT authentication token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

# Role hint for clients deciding what to render
class SessionRole(BaseModel):
    user_id: int
    email: str
    role: str
    is_admin: bool

# Schema for administrative role updates
class RoleUpdate(BaseModel):
    role: Literal["user", "admin"]
