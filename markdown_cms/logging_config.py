"""
Logging setup for the web process.

Called once from the startup hook; modules only ever do
``logging.getLogger(__name__)``.
"""
from __future__ import annotations

import logging

_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'

# Chatty third-party loggers that add nothing at info level
_QUIET_LOGGERS = [
    'uvicorn.access',
    'multipart',
]


def configure_logging(level: str = 'info') -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=numeric, format=_FORMAT)
    root.setLevel(numeric)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric, logging.WARNING))
