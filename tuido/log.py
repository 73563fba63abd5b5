import logging
from logging.handlers import RotatingFileHandler


def setup_logging(log_file, level="WARNING"):
    """Send the 'tuido' logger to a rotating file; curses owns the terminal."""
    logger = logging.getLogger("tuido")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    lvl = getattr(logging, str(level).upper(), None)
    if not isinstance(lvl, int):
        lvl = logging.WARNING
    fh = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=2, encoding="utf-8")
    fh.setLevel(lvl)
    fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(fh)
    return logger
