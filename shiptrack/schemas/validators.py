"""
Custom Validators
=================

Reusable validation functions for request schemas.
"""

import re
from typing import Any, Dict, Iterable, Optional, Tuple

from pydantic.alias_generators import to_camel

MAX_PASSWORD_BYTES = 72  # bcrypt ignores anything beyond this
MAX_PHONE_LENGTH = 20


def validate_required_text(value: Optional[str], label: str, max_length: Optional[int] = None) -> str:
    """Non-empty after trimming, and no longer than the column holding it"""
    if value is None:
        raise ValueError(f'{label} is required')
    if not isinstance(value, str):
        raise ValueError(f'{label} must be a string')
    value = value.strip()
    if not value:
        raise ValueError(f'{label} is required')
    validate_max_length(value, label, max_length)
    return value


def validate_max_length(value: Optional[str], label: str, max_length: Optional[int]) -> Optional[str]:
    if value is not None and max_length is not None and len(value) > max_length:
        raise ValueError(f'{label} must be at most {max_length} characters')
    return value


def validate_optional_text(value: Optional[str]) -> Optional[str]:
    """Blank strings become None"""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError('Expected text')
    value = value.strip()
    return value or None


def validate_phone_number(value: Optional[str]) -> Optional[str]:
    """Loose international format: optional +, then digits, spaces, dashes or dots; at least 10 digits"""
    if not value:
        return None
    if not re.match(r'^\+?[0-9 ()\-.]+$', value):
        raise ValueError('Phone number may only contain digits, spaces, dashes and a leading +')
    if len(re.sub(r'\D', '', value)) < 10:
        raise ValueError('Phone number must be at least 10 digits')
    return validate_max_length(value, 'Phone number', MAX_PHONE_LENGTH)


def validate_password(value: str) -> str:
    if len(value) < 6:
        raise ValueError('Password must be at least 6 characters')
    if len(value.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise ValueError(f'Password must be at most {MAX_PASSWORD_BYTES} bytes')
    return value


def validate_positive_number(value: Optional[float]) -> Optional[float]:
    """Validate positive number"""
    if value is not None and value <= 0:
        raise ValueError('Weight must be a positive number')
    return value


def _wire_name(part: Any) -> str:
    """Locations may carry the attribute name; clients know the camelCase key."""
    part = str(part)
    return to_camel(part) if '_' in part else part


def first_error(errors: Iterable[Dict[str, Any]]) -> Tuple[str, Optional[str]]:
    """
    Reduce a pydantic error list to (message, field) of the first violated rule.
    Request errors carry a leading 'body'/'query'/'path' location that is dropped.
    """
    for error in errors:
        loc = [_wire_name(part) for part in error.get('loc', ()) if part not in ('body', 'query', 'path')]
        field = '.'.join(loc) or None
        error_type = error.get('type', '')
        if error_type == 'value_error' and error.get('ctx', {}).get('error') is not None:
            message = str(error['ctx']['error'])
        elif error_type == 'missing' and field:
            message = f'{field} is required'
        else:
            message = error.get('msg', 'Invalid request')
        return message, field
    return 'Invalid request', None
