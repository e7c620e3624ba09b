"""
Main Settings Configuration Module
Contains runtime settings such as environment variable configuration, logging configuration,
model defaults and function calling behaviour.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file
load_dotenv()


def get_environment_variable(key: str, default: str = '') -> str:
    """Get environment variable value"""
    return os.environ.get(key, default)

def get_boolean_env(key: str, default: bool = False) -> bool:
    """Get boolean environment variable"""
    value = os.environ.get(key, '').lower()
    if default:
        return value not in ('false', '0', 'no', 'off')
    else:
        return value in ('true', '1', 'yes', 'on')

def get_int_env(key: str, default: int = 0) -> int:
    """Get integer environment variable"""
    try:
        return int(os.environ.get(key, str(default)))
    except (ValueError, TypeError):
        return default

def get_float_env(key: str, default: float = 0.0) -> float:
    """Get float environment variable"""
    try:
        return float(os.environ.get(key, str(default)))
    except (ValueError, TypeError):
        return default


# --- Global Log Control Configuration ---
DEBUG_LOGS_ENABLED = get_boolean_env("DEBUG_LOGS_ENABLED", False)

# --- Log Rotation Configuration ---
LOG_FILE_MAX_BYTES = get_int_env("LOG_FILE_MAX_BYTES", 10 * 1024 * 1024)  # 10MB default
LOG_FILE_BACKUP_COUNT = get_int_env("LOG_FILE_BACKUP_COUNT", 5)

# --- Path Configuration (Using pathlib) ---
_CONFIG_DIR = Path(__file__).parent
_PROJECT_ROOT = _CONFIG_DIR.parent

LOG_DIR = get_environment_variable("GENAI_LOG_DIR", str(_PROJECT_ROOT / "logs"))
APP_LOG_FILE_PATH = str(Path(LOG_DIR) / "genai_client.log")

# --- Credentials ---
# Checked in order at client construction time, never cached at import.
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")

# --- Model Defaults ---
# Used when Client.generative_model() is called without a name.
DEFAULT_MODEL = get_environment_variable("GENAI_DEFAULT_MODEL", "gemini-2.5-flash")

# --- Function Calling Configuration ---
FUNCTION_CALLING_DEBUG = get_boolean_env("FUNCTION_CALLING_DEBUG", False)
FUNCTION_CALLING_MAX_ROUNDS = get_int_env("FUNCTION_CALLING_MAX_ROUNDS", 8)
