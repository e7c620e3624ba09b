from .fc_debug import FCDebugLogger, FCModule, get_fc_logger
from .setup import CLIENT_LOGGER_NAME, setup_client_logging

__all__ = [
    'CLIENT_LOGGER_NAME',
    'FCDebugLogger',
    'FCModule',
    'get_fc_logger',
    'setup_client_logging',
]
