import logging
import sys
from typing import Iterable

from fundtracker.utils.logging_redaction import install_redaction_filter

# Third-party loggers that flood INFO; SQL echo is driven by DEBUG on the engine
QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "httpx")


def setup_logging(level: str = "INFO", quiet: Iterable[str] = QUIET_LOGGERS) -> None:
    """
    Configure centralized application logging.

    Every record goes to stdout through the redaction filter, so user
    e-mails and database credentials never reach the log stream.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    install_redaction_filter()

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)
