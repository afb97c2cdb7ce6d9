from boxoffice.core.utils.serialization import normalize_ctx


class AppError(Exception):
    def __init__(self, message: str = "", *, ctx: dict | None = None) -> None:
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        self.ctx = normalize_ctx(ctx or {})


class NotFound(AppError):
    pass


class Unauthorized(AppError):
    pass


class Forbidden(AppError):
    pass


class Conflict(AppError):
    pass


class SeatUnavailable(Conflict):
    def __init__(self, seat_ids: list[str] | None = None, *, ctx: dict | None = None) -> None:
        super().__init__("Selected seat is not available", ctx={**(ctx or {}), "seat_ids": sorted(seat_ids or [])})


class InvalidInput(AppError):
    pass


class Unprocessable(AppError):
    pass
