# Client, models and sessions
from .client import Client, resolve_api_key
from .model import GenerativeModel
from .chat import ChatSession
from .transport import HttpTransport, Transport

# Function calling helpers
from .utils_ext.function_calling import (
    PendingCall,
    SchemaConversionError,
    SchemaConverter,
    check_function_call_contract,
)
from .utils_ext.function_dispatch import FunctionRegistry, run_function_calls
from .utils_ext.usage_tracker import ModelUsage, UsageTracker

# Data model re-exports
from models import (
    Content,
    FunctionCall,
    FunctionCallingConfig,
    FunctionCallingMode,
    FunctionDeclaration,
    FunctionResponse,
    GenerateContentResponse,
    Part,
    Schema,
    Tool,
    ToolConfig,
    Type,
    text,
)
from models.exceptions import (
    ArgumentError,
    ArgumentTypeError,
    BlockedResponseError,
    GenAIError,
    MissingRequiredFieldError,
    ModeViolationError,
    TransportError,
    UnknownFunctionError,
)

__all__ = [
    'Client',
    'resolve_api_key',
    'GenerativeModel',
    'ChatSession',
    'HttpTransport',
    'Transport',

    'PendingCall',
    'SchemaConversionError',
    'SchemaConverter',
    'check_function_call_contract',
    'FunctionRegistry',
    'run_function_calls',
    'ModelUsage',
    'UsageTracker',

    'Content',
    'FunctionCall',
    'FunctionCallingConfig',
    'FunctionCallingMode',
    'FunctionDeclaration',
    'FunctionResponse',
    'GenerateContentResponse',
    'Part',
    'Schema',
    'Tool',
    'ToolConfig',
    'Type',
    'text',

    'ArgumentError',
    'ArgumentTypeError',
    'BlockedResponseError',
    'GenAIError',
    'MissingRequiredFieldError',
    'ModeViolationError',
    'TransportError',
    'UnknownFunctionError',
]
