"""
Custom Exceptions for ShipTrack Services
========================================

All business-logic errors. The API layer maps each class to one HTTP status.
"""


class ShipTrackException(Exception):
    """Base exception for all ShipTrack errors"""
    status_code = 500

    def __init__(self, message, error_code=None, details=None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self):
        return {'error': self.message}


class ValidationError(ShipTrackException):
    """Bad or missing input"""
    status_code = 400

    def __init__(self, message, field=None, details=None):
        super().__init__(message, 'VALIDATION_ERROR', details)
        self.field = field


class AuthenticationError(ShipTrackException):
    """Missing, invalid or expired credentials"""
    status_code = 401

    def __init__(self, message="Authentication failed", details=None):
        super().__init__(message, 'AUTHENTICATION_ERROR', details)


class AuthorizationError(ShipTrackException):
    """Authenticated but not allowed"""
    status_code = 403

    def __init__(self, message="Access denied", details=None):
        super().__init__(message, 'AUTHORIZATION_ERROR', details)


class NotFoundError(ShipTrackException):
    """Resource does not exist"""
    status_code = 404

    def __init__(self, resource_type, resource_id=None, details=None):
        if resource_id is None:
            message = f"{resource_type} not found"
        else:
            message = f"{resource_type} '{resource_id}' not found"
        super().__init__(message, 'NOT_FOUND', details)
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(ShipTrackException):
    """Write collided with an existing row (unique constraint)"""
    status_code = 409

    def __init__(self, message, resource_type=None, details=None):
        super().__init__(message, 'CONFLICT_ERROR', details)
        self.resource_type = resource_type


__all__ = [
    'ShipTrackException', 'ValidationError', 'AuthenticationError',
    'AuthorizationError', 'NotFoundError', 'ConflictError',
]
