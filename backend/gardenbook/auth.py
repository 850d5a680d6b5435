"""Authentication utilities: password hashing, JWT, admin gate."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from gardenbook.core.domain_types import AdminIdentity, Table
from gardenbook.core.errors import InvalidCredentialError, MissingCredentialError, NotAuthorizedError
from gardenbook.core.repository_protocols import CatalogRepository, call_repository
from gardenbook.models.user import Role

logger = logging.getLogger("gardenbook.auth")

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ── Password helpers ──────────────────────────────────────────
def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


# ── Token helpers ─────────────────────────────────────────────
def create_access_token(user_id: int, secret_key: str, expire_minutes: int) -> str:
    payload = {
        "sub": str(user_id),
        "exp": datetime.now(timezone.utc) + timedelta(minutes=expire_minutes),
    }
    return jwt.encode(payload, secret_key, algorithm=ALGORITHM)


def _decode_access_token(token: str, secret_key: str) -> Optional[dict]:
    try:
        return jwt.decode(token, secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None


class JwtAdminGate:
    """Resolves a bearer token to an active admin account, or rejects it."""

    def __init__(self, repository: CatalogRepository, secret_key: str):
        self._repository = repository
        self._secret_key = secret_key

    async def authenticate(self, credential: Optional[str]) -> AdminIdentity:
        raw = (credential or "").strip()
        scheme, _, rest = raw.partition(" ")
        token = rest.strip() if scheme.lower() == "bearer" else raw
        if not token:
            raise MissingCredentialError()

        payload = _decode_access_token(token, self._secret_key)
        if not payload or not str(payload.get("sub", "")).isdigit():
            raise InvalidCredentialError()
        user_id = int(payload["sub"])

        user = await call_repository("read", self._repository.get(Table.USERS, user_id))
        if user is None or not user.get("is_active"):
            logger.warning("Token for unknown or disabled user %s", user_id)
            raise NotAuthorizedError()
        if user.get("role") != Role.ADMIN.value:
            raise NotAuthorizedError()
        return AdminIdentity(id=user["id"], email=user["email"])
