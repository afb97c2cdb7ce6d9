from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, NamedTuple


class TokenPayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sub: str
    iat: int
    exp: int
    nbf: int | None = None
    jti: str | None = None
    typ: Literal["access", "refresh"] | None = None
    iss: str | None = None
    aud: str | list[str] | None = None
    roles: list[str] = Field(default_factory=list)


class Principal(NamedTuple):
    user_id: int
    roles: frozenset[str]

    @property
    def is_admin(self) -> bool:
        return "ADMIN" in self.roles
