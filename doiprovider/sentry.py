import logging
from typing import Literal

from sentry_sdk import init, capture_exception, capture_message, isolation_scope

from doiprovider import settings

logger = logging.getLogger(__name__)
enabled = (not settings.DEBUG_MODE) and settings.SENTRY_DSN

if enabled:
    sentry = init(dsn=settings.SENTRY_DSN)

LOG_LEVEL_MAP: dict[int, Literal['debug', 'info', 'warning', 'error', 'critical']] = {
    logging.DEBUG: 'debug',
    logging.INFO: 'info',
    logging.WARNING: 'warning',
    logging.ERROR: 'error',
    logging.CRITICAL: 'critical'
}

# Nothing in this module should send to Sentry if debug mode is on
#   or if Sentry isn't configured.


def log_exception(exception: Exception, extra_data=None):
    if not enabled:
        logger.warning('Sentry called to log exception, but is not active')
        return None
    with isolation_scope() as scope:
        for key, value in (extra_data or {}).items():
            scope.set_extra(key, value)
        return capture_exception(exception)


def log_message(message, extra_data=None, level=logging.ERROR):
    if not enabled:
        logger.warning(
            'Sentry called to log message, but is not active: %s' % message
        )
        return None
    with isolation_scope() as scope:
        for key, value in (extra_data or {}).items():
            scope.set_extra(key, value)
        level_str = LOG_LEVEL_MAP.get(level, 'error')
        return capture_message(message, level=level_str)
