import logging
import re
import time
import uuid
from datetime import datetime, timezone

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from resume_builder.config import settings
from resume_builder.exceptions import AuthProviderError
from resume_builder.models.user import User
from resume_builder.utils.security import generate_token, hash_password, verify_password

logger = logging.getLogger("resume_builder.auth")

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "user_metadata": {"name": user.full_name},
        "created_at": user.created_at,
    }


class AuthService:
    """Local stand-in for the hosted auth provider: accounts in SQL, sessions in memory."""

    def __init__(self):
        self._sessions: dict[str, tuple[dict, float]] = {}  # token -> (user, expires_at)

    def _cleanup_expired(self):
        now = time.time()
        self._sessions = {
            t: (user, exp) for t, (user, exp) in self._sessions.items() if exp > now
        }

    def create_user(self, db: Session, email: str, password: str, full_name: str | None = None) -> dict:
        email = email.strip().lower()
        if not EMAIL_RE.match(email):
            raise AuthProviderError("Invalid email address")
        if len(password) < settings.min_password_chars:
            raise AuthProviderError(
                f"Password should be at least {settings.min_password_chars} characters"
            )
        if db.query(User).filter(User.email == email).first():
            raise AuthProviderError("A user with this email address has already been registered")

        now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        user = User(
            id=str(uuid.uuid4()),
            email=email,
            password_hash=hash_password(password),
            full_name=full_name,
            created_at=now,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError as exc:
            # lost a race with a concurrent sign-up for the same email
            db.rollback()
            raise AuthProviderError("A user with this email address has already been registered") from exc
        db.refresh(user)
        logger.info("User created: %s", user.id)
        return _user_to_dict(user)

    def sign_in(self, db: Session, email: str, password: str) -> dict | None:
        email = email.strip().lower()
        throttle_key = f"signin:{email}"
        delay = self._get_throttle_delay(db, throttle_key)
        if delay > 0:
            return {"error": "too_many_attempts", "retry_after_seconds": delay}

        user = db.query(User).filter(User.email == email).first()
        if not user or not verify_password(user.password_hash, password):
            self._record_failed_attempt(db, throttle_key)
            logger.warning("Failed sign-in for %s", email)
            return None

        self._reset_failed_attempts(db, throttle_key)
        token = generate_token()
        user_data = _user_to_dict(user)
        self._sessions[token] = (user_data, time.time() + settings.token_ttl_seconds)
        return {
            "access_token": token,
            "token_type": "bearer",
            "expires_in_seconds": settings.token_ttl_seconds,
            "user": user_data,
        }

    def verify(self, token: str) -> dict | None:
        self._cleanup_expired()
        session = self._sessions.get(token)
        return session[0] if session else None

    def sign_out(self, token: str):
        self._sessions.pop(token, None)

    def _get_throttle_delay(self, db: Session, key: str) -> float:
        row = db.execute(
            text("SELECT failed_attempts, last_failed_at FROM auth_throttle WHERE key = :key"),
            {"key": key},
        ).fetchone()
        if not row:
            return 0
        failed_attempts = int(row[0])
        last_failed_at = float(row[1])

        if failed_attempts < 3:
            return 0
        if failed_attempts < 5:
            delay = 5.0
        elif failed_attempts < 10:
            delay = 30.0
        else:
            delay = 300.0
        remaining = delay - (time.time() - last_failed_at)
        return max(0, remaining)

    def _record_failed_attempt(self, db: Session, key: str):
        now = time.time()
        db.execute(
            text(
                """
                INSERT INTO auth_throttle (key, failed_attempts, last_failed_at)
                VALUES (:key, 1, :now)
                ON CONFLICT(key) DO UPDATE SET
                    failed_attempts = failed_attempts + 1,
                    last_failed_at = :now
                """
            ),
            {"key": key, "now": now},
        )
        db.commit()

    def _reset_failed_attempts(self, db: Session, key: str):
        db.execute(
            text("DELETE FROM auth_throttle WHERE key = :key"),
            {"key": key},
        )
        db.commit()


auth_service = AuthService()
