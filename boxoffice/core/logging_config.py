import logging
from boxoffice.core.config import LOG_LEVEL
from boxoffice.core.ctx import get_request_id, AUTH_USER_ID_CTX

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | user=%(user_id)s | %(message)s"


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        record.user_id = AUTH_USER_ID_CTX.get() or "-"
        return True


def configure_logging(level: str | None = None) -> None:
    handler = logging.StreamHandler()
    handler.addFilter(RequestContextFilter())
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format=LOG_FORMAT,
        handlers=[handler],
        force=True,
    )
