"""Logger lookup for footmark modules.

footmark only ever logs at debug level and never installs handlers;
applications decide where the records go.

Example:
    >>> from footmark.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Serializing document")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``footmark`` namespace.

    Args:
        name: Logger name (typically __name__)

    Example:
        >>> get_logger("extensions").name
        'footmark.extensions'
    """
    if not (name == "footmark" or name.startswith("footmark.")):
        name = f"footmark.{name}"
    return logging.getLogger(name)
