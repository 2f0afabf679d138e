"""
Core Module
============

Shared core utilities and abstractions used across the application.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from helpdesk.core.exceptions import (
    ApplicationException,
    DomainException,
    ValidationException,
    PermissionDeniedException,
    ResourceNotFoundException,
    ConfigurationException,
    ExternalServiceException,
    CollaboratorException,
)

__all__ = [
    "ApplicationException",
    "DomainException",
    "ValidationException",
    "PermissionDeniedException",
    "ResourceNotFoundException",
    "ConfigurationException",
    "ExternalServiceException",
    "CollaboratorException",
]
