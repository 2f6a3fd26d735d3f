"""
Thread-safe rate-limited logging.

Query-layer degradations (a failed dictionary lookup, an unreadable metadata
value) tend to repeat for every token of a batch; this keeps one log line per
distinct message per TTL window.
"""
import logging
import threading
from typing import Optional

from cachetools import TTLCache

logger = logging.getLogger(__name__)

# At most 256 distinct messages, each suppressed for 60 seconds after logging
_log_cache: TTLCache = TTLCache(maxsize=256, ttl=60)
_log_cache_lock = threading.RLock()


def rate_limited_log(
    message: str,
    level: str = "warning",
    logger_instance: Optional[logging.Logger] = None,
    exc_info: bool = False,
) -> bool:
    """
    Log a message unless the same message was logged recently.

    Args:
        message: Message to log
        level: Log level (debug, info, warning, error, critical)
        logger_instance: Logger to use (defaults to module logger)
        exc_info: Attach the active exception's traceback

    Returns:
        True if the message was emitted, False if it was suppressed
    """
    log_instance = logger_instance or logger
    log_method = getattr(log_instance, level.lower(), log_instance.warning)
    key = f"{log_instance.name}:{level}:{message}"

    with _log_cache_lock:
        if key in _log_cache:
            return False
        _log_cache[key] = True

    log_method(message, exc_info=exc_info)
    return True


def reset_rate_limits() -> None:
    """Forget every recently logged message"""
    with _log_cache_lock:
        _log_cache.clear()
