import logging
import re

from fastapi import APIRouter, status

from core.config import settings
from core.errors import PortalError
from core.pin_storage import VerificationResult, generate_pin, pin_store
from schemas.users import SignupRequest, VerifyPinRequest

logger = logging.getLogger(__name__)

router = APIRouter()

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(payload: SignupRequest):
    """Issue a one-time PIN to a company email address"""
    email = payload.email
    if not email or not isinstance(email, str):
        raise PortalError(status.HTTP_400_BAD_REQUEST, "Email is required")

    email_lower = email.strip().lower()
    domain = settings.company_email_domain
    if not email_lower.endswith(f"@{domain}"):
        raise PortalError(
            status.HTTP_400_BAD_REQUEST,
            f"Please use your company email address (@{domain})",
        )
    if not EMAIL_RE.match(email_lower):
        raise PortalError(status.HTTP_400_BAD_REQUEST, "Please enter a valid email address")

    if pin_store.has_active_pin(email_lower):
        raise PortalError(
            status.HTTP_409_CONFLICT,
            "A PIN has already been sent to this email. Check your inbox.",
        )

    pin = generate_pin()
    pin_store.store(email_lower, pin)

    # TODO: send the PIN by email once a mail provider is configured
    logger.info("PIN for %s: %s", email_lower, pin)

    body = {"message": "Check your email for your access PIN"}
    if settings.return_test_pin:
        body["testPin"] = pin
    return body


@router.post("/verify-pin")
async def verify_pin(payload: VerifyPinRequest):
    """Exchange email + PIN for portal access"""
    if not payload.email or not payload.pin:
        raise PortalError(status.HTTP_400_BAD_REQUEST, "Email and PIN are required")

    email_lower = payload.email.strip().lower()
    result = pin_store.verify(email_lower, payload.pin)
    if result is not VerificationResult.VERIFIED:
        logger.info("PIN verification failed for %s: %s", email_lower, result.value)
        raise PortalError(
            status.HTTP_401_UNAUTHORIZED,
            "Invalid or expired PIN. Please request a new one.",
        )

    return {
        "message": "PIN verified successfully",
        "email": email_lower,
        "accessGranted": True,
    }
