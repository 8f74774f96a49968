"""Domain exceptions rendered as JSON error responses."""


class AppException(Exception):
    """Base exception for all domain errors.

    Subclasses set ``status_code`` at the class level; callers provide
    the message shown to the client.
    """

    status_code = 500

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundException(AppException):
    status_code = 404


class UnauthorizedException(AppException):
    status_code = 401


class ForbiddenException(AppException):
    status_code = 403


class ConflictException(AppException):
    status_code = 409


class ValidationException(AppException):
    status_code = 400


class BusinessRuleException(AppException):
    status_code = 422
