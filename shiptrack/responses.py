"""
API Response Helpers
====================

Standardized response bodies.
"""

from typing import Any, Dict, Optional


class APIResponse:
    """Standard API response format"""

    @staticmethod
    def success(message: Optional[str] = None, **data: Any) -> Dict[str, Any]:
        body = dict(data)
        if message:
            body['message'] = message
        return body

    @staticmethod
    def error(message: str = "Error") -> Dict[str, Any]:
        return {'error': message}

    @staticmethod
    def legacy_error(message: str, field: Optional[str] = None) -> Dict[str, Any]:
        """Older routes answer validation failures with message/field."""
        return {'message': message, 'field': field or ''}
