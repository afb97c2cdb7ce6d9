from contextvars import ContextVar

REQUEST_ID_CTX: ContextVar[str | None] = ContextVar("request_id", default=None)
AUTH_USER_ID_CTX: ContextVar[int | None] = ContextVar("auth_user_id", default=None)


def get_request_id() -> str | None:
    return REQUEST_ID_CTX.get()
