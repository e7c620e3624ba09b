"""
Timeout Configuration Module
Contains request and connection timeouts for the remote model service.
"""

import os
from dotenv import load_dotenv

# Load .env file
load_dotenv()

# --- Request timeouts ---
REQUEST_TIMEOUT_SECONDS = float(os.environ.get('REQUEST_TIMEOUT_SECONDS', '60'))  # total time for one generateContent call
CONNECT_TIMEOUT_SECONDS = float(os.environ.get('CONNECT_TIMEOUT_SECONDS', '10'))
