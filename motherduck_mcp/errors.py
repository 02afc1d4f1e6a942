"""
Error taxonomy for tool, prompt and resource requests.
Every failure is surfaced to the caller as a JSON-RPC error object.
"""

from enum import Enum
from typing import Any, Dict


class ErrorType(Enum):
    """Kinds of failures a request can end with."""
    VALIDATION_ERROR = "validation_error"
    UNSUPPORTED_KIND = "unsupported_kind"
    MISSING_CREDENTIAL = "missing_credential"
    CONNECTION_FAILED = "connection_failed"
    SCHEMA_READ_FAILED = "schema_read_failed"
    QUERY_FAILED = "query_failed"
    NO_ACTIVE_SESSION = "no_active_session"
    UNSUPPORTED_RESOURCE = "unsupported_resource"
    UNKNOWN_PROMPT = "unknown_prompt"
    UNKNOWN_TOOL = "unknown_tool"


# JSON-RPC error codes
INVALID_PARAMS = -32602
METHOD_NOT_FOUND = -32601
SERVER_ERROR = -32000
NO_SESSION = -32001
RESOURCE_NOT_FOUND = -32002


class ToolError(Exception):
    """Base class for every failure reported through the protocol error channel."""

    error_type: ErrorType
    code: int = SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_error(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "data": {"type": self.error_type.value},
        }


class ValidationError(ToolError):
    error_type = ErrorType.VALIDATION_ERROR
    code = INVALID_PARAMS


class UnsupportedKind(ToolError):
    error_type = ErrorType.UNSUPPORTED_KIND
    code = INVALID_PARAMS


class MissingCredential(ToolError):
    error_type = ErrorType.MISSING_CREDENTIAL
    code = INVALID_PARAMS


class ConnectionFailed(ToolError):
    error_type = ErrorType.CONNECTION_FAILED


class SchemaReadFailed(ToolError):
    error_type = ErrorType.SCHEMA_READ_FAILED


class QueryFailed(ToolError):
    error_type = ErrorType.QUERY_FAILED


class NoActiveSession(ToolError):
    error_type = ErrorType.NO_ACTIVE_SESSION
    code = NO_SESSION

    def __init__(self, message: str = "No active database connection. Please initialize one first."):
        super().__init__(message)


class UnsupportedResource(ToolError):
    error_type = ErrorType.UNSUPPORTED_RESOURCE
    code = RESOURCE_NOT_FOUND


class UnknownPrompt(ToolError):
    error_type = ErrorType.UNKNOWN_PROMPT
    code = INVALID_PARAMS


class UnknownTool(ToolError):
    error_type = ErrorType.UNKNOWN_TOOL
    code = METHOD_NOT_FOUND
