"""Logging utilities.

This module provides a unified logging interface for the SRP engine. All
engine loggers live under the ``srp_pake`` namespace and share a single
stream handler format.

Notes
-----
Loggers must never receive private scalars, shared secrets, session keys or
passwords. Log identities, group names and state transitions only.
"""

import logging
from typing import Optional


_LOGGERS: dict = {}

# Level applied to loggers created after the last set_log_level call
_LEVEL: Optional[int] = None

_LOG_FORMAT = "%(levelname)s:%(name)s:%(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger for the given module.

    Parameters
    ----------
    name : str
        Module name (typically __name__).

    Returns
    -------
    logging.Logger
        Configured logger instance.

    Notes
    -----
    - Always use this function instead of direct logging.getLogger()
    - Names already inside the ``srp_pake`` namespace are not prefixed twice

    Examples
    --------
    >>> logger = get_logger(__name__)
    >>> logger.info("Handshake started")
    INFO:srp_pake.protocol.client:Handshake started
    """
    if name not in _LOGGERS:
        qualified = name if name.startswith("srp_pake") else f"srp_pake.{name}"
        logger = logging.getLogger(qualified)
        if not logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(_LOG_FORMAT))
            logger.addHandler(handler)
            logger.propagate = False
        if _LEVEL is not None:
            logger.setLevel(_LEVEL)
        _LOGGERS[name] = logger
    return _LOGGERS[name]


def set_log_level(level: str) -> None:
    """Set the logging level for all engine loggers.

    Parameters
    ----------
    level : str
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Unknown names
        fall back to INFO. Loggers created later start at the same level.
    """
    global _LEVEL
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    _LEVEL = numeric_level

    for logger in _LOGGERS.values():
        logger.setLevel(numeric_level)


def get_session_logger(role: str) -> logging.Logger:
    """Get a logger for one side of the handshake.

    Parameters
    ----------
    role : str
        Handshake role (e.g., "client", "server").

    Returns
    -------
    logging.Logger
        Logger configured for session-level messages.

    Examples
    --------
    >>> logger = get_session_logger("server")
    >>> logger.debug("AWAITING_PROOF")
    """
    return get_logger(f"session.{role}")
