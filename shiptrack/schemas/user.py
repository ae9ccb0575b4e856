"""
User Domain Schemas
===================

Schemas for registration, login, user profiles and admin updates.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import EmailStr, Field, field_validator

from .base import BaseSchema
from .validators import validate_password, validate_phone_number, validate_required_text


class UserSchema(BaseSchema):
    """Public view of a user. The password hash never leaves the server."""
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    email_verified: bool = False
    phone_verified: bool = False
    is_admin: bool = False
    created_at: Optional[datetime] = None


class RegisterSchema(BaseSchema):
    name: str = Field(None, validate_default=True)
    email: EmailStr
    password: str
    phone: Optional[str] = None

    @field_validator('name', mode='before')
    @classmethod
    def name_required(cls, v):
        return validate_required_text(v, 'Name', 100)

    @field_validator('email', mode='after')
    @classmethod
    def email_lowercase(cls, v):
        return v.lower()

    @field_validator('password')
    @classmethod
    def password_strength(cls, v):
        return validate_password(v)

    @field_validator('phone')
    @classmethod
    def phone_format(cls, v):
        return validate_phone_number(v)


class LoginSchema(BaseSchema):
    email: str
    password: str

    @field_validator('email', mode='before')
    @classmethod
    def email_required(cls, v):
        return validate_required_text(v, 'Email').lower()

    @field_validator('password', mode='before')
    @classmethod
    def password_required(cls, v):
        if not v:
            raise ValueError('Password is required')
        return v


class AdminUserUpdateSchema(BaseSchema):
    is_admin: bool


class VerificationGenerateSchema(BaseSchema):
    type: Literal['email', 'phone'] = 'email'


class VerificationVerifySchema(BaseSchema):
    code: str = Field(None, validate_default=True)
    type: Literal['email', 'phone'] = 'email'

    @field_validator('code', mode='before')
    @classmethod
    def code_required(cls, v):
        return validate_required_text(v, 'Verification code')
