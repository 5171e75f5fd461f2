"""
User profile schemas.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from couplesfin.utils.validation_utils import normalize_currency_code, validate_cpf_field


class UserProfileUpdate(BaseModel):
    """
    Profile fields a user can edit.

    cpf is optional; when present it must be complete and valid, and it is
    stored as digits only.

    Examples:
        >>> UserProfileUpdate(full_name="Ana", cpf="529.982.247-25").cpf
        '52998224725'
        >>> UserProfileUpdate(full_name="Ana", cpf="529.982.247-24")  # ValidationError: CPF inválido
    """
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    full_name: str = Field(..., min_length=1, max_length=120, description="Display name")
    cpf: Optional[str] = Field(None, description="CPF, with or without punctuation")
    preferred_currency: str = Field("BRL", description="Currency used for totals (ISO 4217)")

    @field_validator('cpf', mode='before')
    @classmethod
    def validate_cpf(cls, v):
        return validate_cpf_field(v)

    @field_validator('preferred_currency', mode='before')
    @classmethod
    def uppercase_currency(cls, v):
        return normalize_currency_code(v)
