"""Typed errors raised by the framework."""

from __future__ import annotations

from enum import Enum


class ErrorType(str, Enum):
    """Category of a framework error."""

    CONFIG = "ConfigError"
    VALIDATION = "ValidationError"
    TERRAFORM = "TerraformError"
    ASSERTION = "AssertionError"
    INTERNAL = "InternalError"

    def __str__(self) -> str:
        return self.value


class FrameworkError(Exception):
    """An error of a given type, optionally wrapping the error that caused it."""

    def __init__(
        self,
        error_type: ErrorType,
        message: str,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.error_type = error_type
        self.message = message
        self.cause = cause
        self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.error_type}: {self.message} (cause: {self.cause})"
        return f"{self.error_type}: {self.message}"


def config_error(message: str, cause: BaseException | None = None) -> FrameworkError:
    return FrameworkError(ErrorType.CONFIG, message, cause)


def validation_error(message: str, cause: BaseException | None = None) -> FrameworkError:
    return FrameworkError(ErrorType.VALIDATION, message, cause)


def terraform_error(message: str, cause: BaseException | None = None) -> FrameworkError:
    return FrameworkError(ErrorType.TERRAFORM, message, cause)


def assertion_error(message: str, cause: BaseException | None = None) -> FrameworkError:
    return FrameworkError(ErrorType.ASSERTION, message, cause)


def internal_error(message: str, cause: BaseException | None = None) -> FrameworkError:
    return FrameworkError(ErrorType.INTERNAL, message, cause)