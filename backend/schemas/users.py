# Request bodies for PIN based email signup

from typing import Optional

from pydantic import BaseModel


class SignupRequest(BaseModel):
    email: Optional[str] = None


class VerifyPinRequest(BaseModel):
    email: Optional[str] = None
    pin: Optional[str] = None
