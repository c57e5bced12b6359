"""Logging filter that stamps records with the current request id.

Attach ``RequestIdFilter`` to a handler and its formatter can reference
``%(request_id)s``; records emitted outside a request carry ``"-"``.
"""

from logging import Filter, LogRecord

from .middleware import REQUEST_ID_CTX


class RequestIdFilter(Filter):
    """Copy ``REQUEST_ID_CTX`` onto each record as ``request_id``."""

    def filter(self, record: LogRecord) -> bool:
        record.request_id = REQUEST_ID_CTX.get()
        return True
