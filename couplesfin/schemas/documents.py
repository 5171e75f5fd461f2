"""
Personal document schemas (CPF).
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CPFValidationResult(BaseModel):
    """Outcome of validating a CPF field, ready to be shown inline in a form."""
    model_config = ConfigDict(frozen=True)

    is_valid: bool = Field(..., description="Whether the field can be submitted")
    error_message: Optional[str] = Field(None, description="Human-readable reason, shown verbatim")
    formatted: str = Field("", description="Input re-masked as XXX.XXX.XXX-XX")


class CPFValidationRequest(BaseModel):
    """Request body for CPF validation."""
    model_config = ConfigDict(extra="forbid")

    cpf: str = Field("", description="CPF as typed, with or without punctuation")
