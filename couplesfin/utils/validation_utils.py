"""
Validation utilities for Pydantic models.

Provides reusable validator functions for common field types
(currency codes, CPF) so every schema normalizes them the same way.
"""
from typing import Any, Optional

import pycountry

from couplesfin.utils.cpf_utils import unformat_cpf, validate_cpf


def normalize_currency_code(v: Any) -> str:
    """
    Validate and normalize an ISO 4217 currency code.

    Use this in Pydantic @field_validator for currency fields:

        @field_validator('currency', mode='before')
        @classmethod
        def validate_currency(cls, v):
            return normalize_currency_code(v)

    Args:
        v: Currency code to validate

    Returns:
        Upper-case, stripped currency code

    Raises:
        ValueError: If the code is not a string, empty or unknown to ISO 4217

    Examples:
        >>> normalize_currency_code(" brl ")
        'BRL'
        >>> normalize_currency_code("XYZ")  # ValueError
    """
    if not isinstance(v, str):
        raise ValueError(f"Currency code must be a string, got {type(v)}")

    code = v.upper().strip()
    if not code:
        raise ValueError("Currency code cannot be empty")

    if len(code) != 3 or pycountry.currencies.get(alpha_3=code) is None:
        raise ValueError(f"Invalid currency code: '{code}'. Must be an ISO 4217 currency.")

    return code


def validate_cpf_field(v: Any) -> Optional[str]:
    """
    Validate an optional CPF field and store it as digits only.

    Empty values become None (the field is optional). Incomplete or invalid
    values raise ValueError carrying the same message the form displays.

    Examples:
        >>> validate_cpf_field("529.982.247-25")
        '52998224725'
        >>> validate_cpf_field("")  # None
        >>> validate_cpf_field("529.982")  # ValueError: CPF incompleto
    """
    if v is None:
        return None
    if not isinstance(v, str):
        raise ValueError(f"CPF must be a string, got {type(v)}")

    result = validate_cpf(v)
    if not result.is_valid:
        raise ValueError(result.error_message)

    return unformat_cpf(result.formatted) or None
