# Configuration settings should be set in app.config
# The environment and the defaults below are used when there's no app (or the option isn't set)
import os
import logging
from flask import current_app
from typing import Any, Optional
from .jsonapi_init import log

DEFAULTS = {
    # "meta.author" (str) or "meta.authors" (list) added to every document
    "JSONAPI_META_AUTHOR": None,
    # "meta.copyright" added to every document
    "JSONAPI_META_COPYRIGHT": None,
    # indent the encoded documents
    "JSONAPI_PRETTY_PRINT": True,
    # "jsonapi.version" member value
    "JSONAPI_VERSION": "1.0",
}


def get_config(option: str) -> Optional[Any]:
    """Retrieve a configuration parameter from the app
    :param option: configuration parameter
    :return: configuration value
    """
    try:
        return current_app.config[option]
    except (KeyError, RuntimeError):
        # RuntimeError: working outside of the application context
        pass

    result = os.environ.get(option, None)
    if result is None:
        return DEFAULTS.get(option)

    if isinstance(DEFAULTS.get(option), bool):
        return result.lower() not in ("", "0", "false", "no")

    return result


def is_debug() -> bool:
    """
    We use the loglevel to check whether we're running in debug mode
    :return: whether the app is in debug mode
    """
    return log.getEffectiveLevel() < logging.INFO
