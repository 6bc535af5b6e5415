"""Setting up a file logger for recording simple logs.

Returns a lazily initialized module logger that writes to a file
`{logging_dir}/{filename}` in the message format only, without metadata.
With DEBUG enabled the same records are mirrored to stderr.
"""
import os
from logging import FileHandler, Formatter, StreamHandler, getLogger
from surveyhub.app.core.config import settings


def get_logs_writer_logger(logging_dir=settings.LOG_PATH, filename='logs.log'):
    os.makedirs(logging_dir, exist_ok=True)
    log_path = os.path.join(logging_dir, filename)

    logger = getLogger("surveyhub")

    if logger.handlers:
        return logger

    logger.setLevel(settings.LOG_LEVEL.upper())
    logger.propagate = False

    handler = FileHandler(log_path, mode="a", encoding="utf-8", delay=True)
    handler.setFormatter(Formatter("%(message)s"))
    logger.addHandler(handler)

    if settings.DEBUG:
        console = StreamHandler()
        console.setFormatter(Formatter("%(levelname)s %(message)s"))
        logger.addHandler(console)

    return logger
