import os
import shlex
import logging

_logger = logging.getLogger(__name__)


def escape(s: str) -> str:
    """Escape a string so a POSIX shell reads it back as a single word."""
    return shlex.quote(s)


def join(args: list[str]) -> str:
    return shlex.join(args)


def isdir(path: str) -> bool:
    result = os.path.isdir(path)
    _logger.debug(f"isdir({path!r}) -> {result}")
    return result
