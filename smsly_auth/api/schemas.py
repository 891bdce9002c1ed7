from datetime import datetime
from typing import Dict

from pydantic import BaseModel, Field

from ..config import MAX_OTP_LENGTH


class RegisterIn(BaseModel):
    phone_number: str = Field(min_length=1, max_length=32)


class RegisterOut(BaseModel):
    message: str = "OTP sent successfully."


class LoginIn(BaseModel):
    phone_number: str = Field(min_length=1, max_length=32)
    otp: str = Field(min_length=1, max_length=MAX_OTP_LENGTH)


class LoginOut(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_at: datetime


class ProtectedOut(BaseModel):
    message: str
    user: Dict[str, str]
