import hashlib
import logging
import secrets
from datetime import timedelta
from typing import Optional

from storefront.models.database import db, UserSession, utcnow

logger = logging.getLogger(__name__)


def hash_token(session_id: str) -> str:
    """Only the digest of a session id is persisted."""
    return hashlib.sha256(session_id.encode("utf-8")).hexdigest()


class SessionStore:
    """Server-held sessions keyed by the id carried in the session cookie."""

    def __init__(self, ttl: timedelta):
        self.ttl = ttl

    def create(self, identity: dict) -> str:
        """Persist an identity snapshot and return the new session id."""
        session_id = secrets.token_urlsafe(32)
        now = utcnow()
        db.session.add(UserSession(
            token_hash=hash_token(session_id),
            identity=dict(identity),
            created_at=now,
            expires_at=now + self.ttl,
        ))
        db.session.commit()
        return session_id

    def get(self, session_id: Optional[str]) -> Optional[dict]:
        """Return the identity bound to ``session_id``, or None if unknown or expired."""
        if not session_id:
            return None

        token_hash = hash_token(session_id)
        record = db.session.get(UserSession, token_hash)
        if record is None:
            return None

        if record.is_expired():
            email = record.identity.get("email")
            # A concurrent request may already have removed the row.
            UserSession.query.filter_by(token_hash=token_hash).delete()
            db.session.commit()
            logger.info("Expired session for %s removed", email)
            return None

        return dict(record.identity)

    def destroy(self, session_id: Optional[str]) -> bool:
        if not session_id:
            return False
        deleted = UserSession.query.filter_by(token_hash=hash_token(session_id)).delete()
        db.session.commit()
        return deleted > 0

    def purge_expired(self) -> int:
        deleted = UserSession.query.filter(UserSession.expires_at <= utcnow()).delete()
        db.session.commit()
        return deleted
