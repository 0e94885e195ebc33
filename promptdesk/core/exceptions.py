"""
Custom exception classes for the PromptDesk application.
These exceptions carry a user-facing message and the HTTP status code the
error middleware responds with.
"""


class PromptDeskException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationException(PromptDeskException):
    """Raised when request data validation fails."""

    def __init__(self, message: str):
        super().__init__(message=message, status_code=400)


class ImageValidationException(ValidationException):
    """Raised when an uploaded image is rejected (type, size or dimensions)."""


class NotFoundException(PromptDeskException):
    """Raised when a requested resource doesn't exist."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(message=f"{resource} not found", status_code=404)
        self.resource = resource
        self.resource_id = resource_id


class PromptNotFoundException(NotFoundException):
    def __init__(self, prompt_id: str):
        super().__init__("Prompt", prompt_id)


class TagNotFoundException(NotFoundException):
    def __init__(self, tag_id: str):
        super().__init__("Tag", tag_id)


class VersionNotFoundException(NotFoundException):
    def __init__(self, version_id: str):
        super().__init__("Version", version_id)


class ExecutionNotFoundException(NotFoundException):
    def __init__(self, execution_id: str):
        super().__init__("Execution", execution_id)


class ImageNotFoundException(NotFoundException):
    def __init__(self, image_id: str):
        super().__init__("Image", image_id)


class SettingNotFoundException(NotFoundException):
    def __init__(self, key: str):
        super().__init__("Setting", key)


class ConflictException(PromptDeskException):
    """Raised when a write would violate a uniqueness rule."""

    def __init__(self, message: str):
        super().__init__(message=message, status_code=409)


class TagNameConflictException(ConflictException):
    """Raised when a tag name is already taken."""

    def __init__(self, name: str):
        super().__init__(message=f"Tag with name '{name}' already exists")
        self.name = name


class FileOperationException(PromptDeskException):
    """Raised when file operations fail."""

    def __init__(self, operation: str, path: str, error: str):
        super().__init__(
            message=f"File {operation} failed for {path}: {error}",
            status_code=500
        )
        self.operation = operation
        self.path = path
        self.error = error
