"""
In-memory PIN storage for email signup.

Records live in process memory only and are lost on restart.
TODO: move PIN records and registered emails into PostgreSQL once the portal
gets its own schema.
"""

import enum
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Set

from core.config import settings

PIN_LENGTH = 6


class VerificationResult(str, enum.Enum):
    VERIFIED = "verified"
    NOT_FOUND = "not_found"
    ALREADY_USED = "already_used"
    EXPIRED = "expired"
    MISMATCH = "mismatch"


@dataclass
class PINRecord:
    email: str
    pin: str
    created_at: datetime
    expires_at: datetime
    used: bool = False


def generate_pin() -> str:
    return "".join(secrets.choice("0123456789") for _ in range(PIN_LENGTH))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PinStore:
    def __init__(self, ttl_minutes: int = None, clock: Callable[[], datetime] = _utcnow):
        self.ttl = timedelta(minutes=ttl_minutes if ttl_minutes is not None else settings.pin_ttl_minutes)
        self.clock = clock
        self._records: Dict[str, PINRecord] = {}
        self._registered: Set[str] = set()

    def store(self, email: str, pin: str) -> PINRecord:
        """Save a PIN for the email, replacing any previous record."""
        now = self.clock()
        key = email.lower()
        record = PINRecord(email=key, pin=pin, created_at=now, expires_at=now + self.ttl)
        self._records[key] = record
        return record

    def get_record(self, email: str) -> Optional[PINRecord]:
        return self._records.get(email.lower())

    def has_active_pin(self, email: str) -> bool:
        record = self.get_record(email)
        return bool(record and not record.used and self.clock() < record.expires_at)

    def verify(self, email: str, pin: str) -> VerificationResult:
        record = self.get_record(email)
        if record is None:
            return VerificationResult.NOT_FOUND
        if record.used:
            return VerificationResult.ALREADY_USED
        if self.clock() > record.expires_at:
            return VerificationResult.EXPIRED
        if record.pin != str(pin).strip():
            return VerificationResult.MISMATCH

        record.used = True
        self._registered.add(record.email)
        return VerificationResult.VERIFIED

    def is_registered(self, email: str) -> bool:
        return email.lower() in self._registered

    def clear(self) -> None:
        self._records.clear()
        self._registered.clear()


pin_store = PinStore()
