import uuid
from dataclasses import dataclass, field

import jwt

from clausewise.config import Settings
from clausewise.models.profile import AppRole


@dataclass(frozen=True)
class CurrentUser:
    id: uuid.UUID
    email: str | None = None
    roles: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return AppRole.ADMIN.value in self.roles

    @property
    def is_operator(self) -> bool:
        # Admins can do everything operators can
        return bool(self.roles & {AppRole.OPERATOR.value, AppRole.ADMIN.value})


def decode_access_token(token: str, settings: Settings) -> tuple[uuid.UUID, str | None]:
    """Validate a bearer token from the identity provider and return (user_id, email).

    Raises jwt.InvalidTokenError for bad signatures, expired tokens, wrong
    audience or a subject that is not a UUID.
    """
    claims = jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        options={"require": ["sub", "exp"]},
    )
    try:
        user_id = uuid.UUID(claims["sub"])
    except (ValueError, TypeError) as e:
        raise jwt.InvalidTokenError("Token subject is not a user id") from e
    return user_id, claims.get("email")
