import logging
from boxoffice.core.ctx import REQUEST_ID_CTX, AUTH_USER_ID_CTX
from boxoffice.core.logging_config import RequestContextFilter, configure_logging


def _record():
    return logging.LogRecord("boxoffice.events", logging.INFO, __file__, 1, "msg", None, None)


def test_filter_uses_placeholders_outside_requests():
    record = _record()

    assert RequestContextFilter().filter(record) is True
    assert (record.request_id, record.user_id) == ("-", "-")


def test_filter_copies_request_context():
    rid_token = REQUEST_ID_CTX.set("req-9")
    user_token = AUTH_USER_ID_CTX.set(7)
    try:
        record = _record()
        RequestContextFilter().filter(record)
    finally:
        REQUEST_ID_CTX.reset(rid_token)
        AUTH_USER_ID_CTX.reset(user_token)

    assert (record.request_id, record.user_id) == ("req-9", 7)


def test_configure_logging_sets_level():
    configure_logging("debug")

    assert logging.getLogger().level == logging.DEBUG
    configure_logging("warning")
    assert logging.getLogger().level == logging.WARNING
