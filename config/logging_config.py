"""Logging setup shared by the pipeline entry points."""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once; later calls only adjust the level."""
    global _configured
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)
    if not _configured:
        logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
        _configured = True
    logging.getLogger().setLevel(numeric_level)
