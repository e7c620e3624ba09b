"""
Constant Configuration Module
Contains values that are fixed by the remote service and are not read from the environment.
"""

# --- Remote API ---
API_BASE_URL = 'https://generativelanguage.googleapis.com'
API_VERSION = 'v1beta'
API_KEY_HEADER = 'x-goog-api-key'

# --- Conversation roles ---
ROLE_USER = 'user'
ROLE_MODEL = 'model'

# --- Function call tracking ---
CALL_ID_PREFIX = 'call_'
CALL_ID_HEX_LENGTH = 24
