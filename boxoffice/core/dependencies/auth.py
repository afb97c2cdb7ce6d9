from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from typing import Annotated
from jose import JWTError, jwt
from pydantic import ValidationError
from boxoffice.core.config import SECRET_KEY, JWT_ISSUER, JWT_AUDIENCE, ALGORITHM
from boxoffice.core.ctx import AUTH_USER_ID_CTX
from boxoffice.domain.auth.schemas import TokenPayload, Principal
from boxoffice.domain.exceptions import Unauthorized, Forbidden


# tokens come from the user service
oauth2_bearer = OAuth2PasswordBearer(tokenUrl="/auth/login")


async def get_token_payload(token: Annotated[str, Depends(oauth2_bearer)]) -> TokenPayload:
    try:
        raw_payload = jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[ALGORITHM],
            issuer=JWT_ISSUER,
            audience=JWT_AUDIENCE,
            options={"verify_aud": True, "leeway": 5}
        )
    except JWTError:
        raise Unauthorized("Invalid authentication credentials", ctx={"reason": "invalid_token"})

    if raw_payload.get("typ") != "access":
        raise Unauthorized("Invalid token type", ctx={"reason": "invalid_type"})
    try:
        return TokenPayload.model_validate(raw_payload)
    except ValidationError:
        raise Unauthorized("Invalid authentication credentials", ctx={"reason": "invalid_claims"})


async def get_current_principal(payload: Annotated[TokenPayload, Depends(get_token_payload)]) -> Principal:
    try:
        user_id = int(payload.sub)
    except ValueError:
        raise Unauthorized("Invalid subject", ctx={"sub": payload.sub})

    AUTH_USER_ID_CTX.set(user_id)
    return Principal(user_id=user_id, roles=frozenset(r.upper() for r in payload.roles))


def require_roles(*allowed_roles: str):
    allowed = set(allowed_roles)

    async def _inner(principal: Annotated[Principal, Depends(get_current_principal)]) -> Principal:
        if allowed and principal.roles.isdisjoint(allowed):
            raise Forbidden(
                "Permission denied",
                ctx={"required": sorted(allowed), "user_roles": sorted(principal.roles)}
            )
        return principal
    return _inner
