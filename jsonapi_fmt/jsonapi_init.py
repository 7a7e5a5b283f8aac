import logging
import os
import sys


def init_logging(loglevel: int = logging.WARNING) -> logging.Logger:
    """
    Specify the log format used in the webserver logs
    The webserver will catch stderr so we redirect everything to sys.stderr
    """
    log = logging.getLogger("jsonapi_fmt")
    if log.level == logging.NOTSET:
        handler = logging.StreamHandler(sys.stderr)
        formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
        handler.setFormatter(formatter)
        log.setLevel(loglevel)
        log.addHandler(handler)
    return log


try:
    DEBUG = os.getenv("DEBUG", logging.WARNING)
    LOGLEVEL = int(DEBUG)
except ValueError:  # pragma: no cover
    print(f'Invalid LogLevel in DEBUG Environment Variable! "{DEBUG}"')
    LOGLEVEL = logging.INFO

log = init_logging(LOGLEVEL)
