"""
Core Exceptions
================

Custom exceptions for the helpdesk core.

Validation and not-found errors are raised synchronously by the ticket
repository and lifecycle and always reach the caller. Collaborator errors
are caught where the remote call is made and turned into fallback values.
"""

from typing import Optional


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DomainException(ApplicationException):
    """Base exception for domain logic violations."""


class ValidationException(DomainException):
    """Malformed input: unknown enum value, missing field, assignee not a PIC."""


class PermissionDeniedException(ValidationException):
    """The acting user's role may not perform the requested action."""

    def __init__(
        self,
        actor_id: str,
        action: str,
        details: Optional[dict] = None
    ):
        self.actor_id = actor_id
        self.action = action
        super().__init__(
            f"User '{actor_id}' is not allowed to {action}",
            details or {"actor_id": actor_id, "action": action}
        )


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        details: Optional[dict] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type}"
        if resource_id:
            message += f" with id '{resource_id}'"
        message += " not found"
        super().__init__(message, details)


class ConfigurationException(ApplicationException):
    """Exception for configuration errors."""


class ExternalServiceException(ApplicationException):
    """Base exception for external service failures."""

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.service_name = service_name
        super().__init__(f"{service_name}: {message}", details)


class CollaboratorException(ExternalServiceException):
    """The remote classification/summarization call failed or timed out."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__("Assistant", message, details)
