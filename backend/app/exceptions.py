"""
Custom Exception Classes for Mermaid Studio

Every error the application raises on purpose derives from AppException, so the
HTTP layer and the editor can turn it into a consistent user-visible message.
"""

from typing import Any, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Stable error codes used in error responses"""

    # Authentication & Authorization (AUTH_xxx)
    INVALID_TOKEN = "AUTH_001"
    TOKEN_EXPIRED = "AUTH_002"
    INVALID_CREDENTIALS = "AUTH_003"
    USER_NOT_FOUND = "AUTH_004"
    USER_INACTIVE = "AUTH_005"
    USER_ALREADY_EXISTS = "AUTH_006"
    USERNAME_TAKEN = "AUTH_007"
    EMAIL_TAKEN = "AUTH_008"
    UNAUTHENTICATED = "AUTH_009"

    # Generation (GEN_xxx)
    MISSING_CREDENTIAL = "GEN_001"
    EMPTY_PROMPT = "GEN_002"
    UPSTREAM_ERROR = "GEN_003"
    EMPTY_GENERATION = "GEN_004"
    GENERATION_IN_PROGRESS = "GEN_005"

    # Diagram (DIAG_xxx)
    DIAGRAM_NOT_FOUND = "DIAG_001"
    EXAMPLE_NOT_FOUND = "DIAG_002"

    # Validation (VAL_xxx)
    VALIDATION_ERROR = "VAL_001"
    INVALID_INPUT = "VAL_002"

    # Database (DB_xxx)
    DATABASE_ERROR = "DB_001"
    NOT_FOUND = "DB_002"

    # General (SYS_xxx)
    INTERNAL_SERVER_ERROR = "SYS_001"
    PERMISSION_DENIED = "SYS_002"


class AppException(Exception):
    """
    Base exception class for all application errors.

    Attributes:
        message: Message shown to the user
        code: Error code (ErrorCode enum)
        status_code: HTTP status code
        details: Additional error details (optional)
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses"""
        result = {
            "error": self.code.value,
            "message": self.message,
            "status_code": self.status_code,
        }
        if self.details:
            result["details"] = self.details
        return result


# ==================== Authentication Exceptions ====================

class AuthenticationException(AppException):
    """Generic authentication failure"""

    def __init__(
        self,
        message: str = "Authentication failed",
        code: ErrorCode = ErrorCode.INVALID_TOKEN,
        status_code: int = 401,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, status_code, details)


class UnauthenticatedException(AuthenticationException):
    """Action requires a signed-in identity"""

    def __init__(self, message: str = "Please sign in to continue"):
        super().__init__(message, ErrorCode.UNAUTHENTICATED)


class TokenExpiredException(AuthenticationException):
    """Token is invalid or expired"""

    def __init__(self, message: str = "Session expired, please sign in again"):
        super().__init__(message, ErrorCode.TOKEN_EXPIRED)


class InvalidCredentialsException(AuthenticationException):
    """Wrong username or password"""

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message, ErrorCode.INVALID_CREDENTIALS)


class UserInactiveException(AuthenticationException):
    """Account disabled"""

    def __init__(self, message: str = "This account has been disabled"):
        super().__init__(message, ErrorCode.USER_INACTIVE, 403)


class UserAlreadyExistsException(AuthenticationException):
    """User already registered"""

    def __init__(
        self,
        message: str = "This user already exists",
        code: ErrorCode = ErrorCode.USER_ALREADY_EXISTS,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, 409, details)


class UsernameTakenException(UserAlreadyExistsException):
    def __init__(self):
        super().__init__("This username is already taken", ErrorCode.USERNAME_TAKEN, {"field": "username"})


class EmailTakenException(UserAlreadyExistsException):
    def __init__(self):
        super().__init__("This email is already registered", ErrorCode.EMAIL_TAKEN, {"field": "email"})


# ==================== Generation Exceptions ====================

class GenerationException(AppException):
    """Generic prompt-to-diagram generation failure"""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UPSTREAM_ERROR,
        status_code: int = 502,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, status_code, details)


class MissingCredentialException(GenerationException):
    """No API key has been stored"""

    def __init__(self, message: str = "Please set your OpenAI API key in settings first"):
        super().__init__(message, ErrorCode.MISSING_CREDENTIAL, 400)


class EmptyPromptException(GenerationException):
    """Prompt is blank"""

    def __init__(self, message: str = "Please describe the diagram you want to create"):
        super().__init__(message, ErrorCode.EMPTY_PROMPT, 400)


class UpstreamErrorException(GenerationException):
    """Generation endpoint failed or could not be reached"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        details = {"upstream_status": status_code} if status_code is not None else None
        super().__init__(message, ErrorCode.UPSTREAM_ERROR, 502, details)
        self.upstream_status = status_code


class EmptyGenerationException(GenerationException):
    """Endpoint answered but returned no usable markup"""

    def __init__(self, message: str = "The model returned an empty diagram, try rephrasing your prompt"):
        super().__init__(message, ErrorCode.EMPTY_GENERATION, 502)


class GenerationInProgressException(GenerationException):
    """A generation request is already in flight"""

    def __init__(self, message: str = "A diagram is already being generated"):
        super().__init__(message, ErrorCode.GENERATION_IN_PROGRESS, 409)


# ==================== Diagram Exceptions ====================

class DiagramNotFoundException(AppException):
    """Diagram not found (or not owned by the caller)"""

    def __init__(self, message: str = "Diagram not found"):
        super().__init__(message, ErrorCode.DIAGRAM_NOT_FOUND, 404)


class ExampleNotFoundException(AppException):
    """Unknown catalog example"""

    def __init__(self, name: str):
        super().__init__(f"Unknown example: {name}", ErrorCode.EXAMPLE_NOT_FOUND, 404, {"example": name})


# ==================== Validation Exceptions ====================

class ValidationException(AppException):
    """Generic validation failure"""

    def __init__(
        self,
        message: str = "Validation error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, ErrorCode.VALIDATION_ERROR, 400, details)


class InvalidInputException(ValidationException):
    """Invalid value for a field"""

    def __init__(self, field: str, reason: str = "Invalid value"):
        super().__init__(
            f"Invalid value for {field}: {reason}",
            {"field": field, "reason": reason},
        )
        self.code = ErrorCode.INVALID_INPUT


# ==================== Database Exceptions ====================

class PersistenceException(AppException):
    """Storage backend rejected a read or write"""

    def __init__(
        self,
        message: str = "Could not access the diagram store",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, ErrorCode.DATABASE_ERROR, 500, details)
