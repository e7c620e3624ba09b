# Schema and tool declaration models
from .schema import Schema, Type
from .tools import (
    FunctionCallingConfig,
    FunctionCallingMode,
    FunctionDeclaration,
    Tool,
    ToolConfig,
    build_declaration_index,
)

# Conversation content models
from .content import (
    Candidate,
    Content,
    FunctionCall,
    FunctionResponse,
    GenerateContentResponse,
    Part,
    PartLike,
    PromptFeedback,
    UsageMetadata,
    function_calls_in,
    function_responses_in,
    joined_text,
    text,
    to_part,
)
from .request import GenerateContentRequest, GenerationConfig

# Exception classes
from .exceptions import (
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
    # Schema and tools
    'Schema',
    'Type',
    'FunctionCallingConfig',
    'FunctionCallingMode',
    'FunctionDeclaration',
    'Tool',
    'ToolConfig',
    'build_declaration_index',

    # Content
    'Candidate',
    'Content',
    'FunctionCall',
    'FunctionResponse',
    'GenerateContentResponse',
    'Part',
    'PartLike',
    'PromptFeedback',
    'UsageMetadata',
    'function_calls_in',
    'function_responses_in',
    'joined_text',
    'text',
    'to_part',
    'GenerateContentRequest',
    'GenerationConfig',

    # Exceptions
    'ArgumentError',
    'ArgumentTypeError',
    'BlockedResponseError',
    'GenAIError',
    'MissingRequiredFieldError',
    'ModeViolationError',
    'TransportError',
    'UnknownFunctionError',
]
