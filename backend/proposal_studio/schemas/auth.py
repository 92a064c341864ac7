import datetime
import uuid

from pydantic import BaseModel, EmailStr, model_validator

MIN_PASSWORD_LENGTH = 6


class RegisterRequest(BaseModel):
    email: EmailStr
    full_name: str
    password: str
    confirm_password: str

    @model_validator(mode="after")
    def _check_password(self) -> "RegisterRequest":
        if not self.full_name.strip():
            raise ValueError("Full name is required")
        if len(self.password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserProfile(BaseModel):
    id: uuid.UUID
    email: str
    full_name: str
    is_active: bool
    created_at: datetime.datetime

    model_config = {"from_attributes": True}
