"""
Configuration Module Entry Point
Exports all configuration items for easy import by other modules.
"""

# Import all configuration items from individual config files
from .constants import *
from .timeouts import *
from .settings import *

# Explicitly export main configuration items (for IDE autocomplete and type checking)
__all__ = [
    # Constant Configuration
    'API_BASE_URL',
    'API_VERSION',
    'API_KEY_HEADER',
    'ROLE_USER',
    'ROLE_MODEL',
    'CALL_ID_PREFIX',
    'CALL_ID_HEX_LENGTH',

    # Timeout Configuration
    'REQUEST_TIMEOUT_SECONDS',
    'CONNECT_TIMEOUT_SECONDS',

    # Settings Configuration
    'DEBUG_LOGS_ENABLED',
    'LOG_FILE_MAX_BYTES',
    'LOG_FILE_BACKUP_COUNT',
    'LOG_DIR',
    'APP_LOG_FILE_PATH',
    'API_KEY_ENV_VARS',
    'DEFAULT_MODEL',
    'FUNCTION_CALLING_DEBUG',
    'FUNCTION_CALLING_MAX_ROUNDS',

    # Utility Functions
    'get_environment_variable',
    'get_boolean_env',
    'get_int_env',
    'get_float_env',
]
