"""
CPF (Cadastro de Pessoas Físicas) formatting and checksum validation.

A CPF has 11 digits: 9 base digits followed by 2 check digits, each one
computed from the digits before it:

    weights 10..2 over digits 0-8  -> check digit 9
    weights 11..2 over digits 0-9  -> check digit 10
    digit = (weighted_sum * 10) % 11, with 10 mapped to 0

Sequences of 11 identical digits satisfy both equations but are not issued,
so they are rejected explicitly.

All functions are pure: they are called on every keystroke of the profile
form, and the returned error message is displayed verbatim.
"""
import re

from couplesfin.schemas.documents import CPFValidationResult

CPF_LENGTH = 11
CPF_BASE_LENGTH = 9

CPF_INCOMPLETE_MESSAGE = "CPF incompleto"
CPF_INVALID_MESSAGE = "CPF inválido"

_NON_DIGIT = re.compile(r"\D")
_REPEATED_DIGIT = re.compile(r"^(\d)\1{10}$")


def unformat_cpf(value: str | None) -> str:
    """Strip everything but digits: '529.982.247-25' -> '52998224725'."""
    if not value:
        return ""
    return _NON_DIGIT.sub("", value)


def format_cpf(value: str | None) -> str:
    """
    Apply the XXX.XXX.XXX-XX mask to whatever digits have been typed so far.

    Extra digits beyond 11 are dropped, so this can be used as a live mask.

    Examples:
        >>> format_cpf("529")
        '529'
        >>> format_cpf("5299822")
        '529.982.2'
        >>> format_cpf("52998224725")
        '529.982.247-25'
        >>> format_cpf("529.982.247-2599")
        '529.982.247-25'
    """
    digits = unformat_cpf(value)[:CPF_LENGTH]

    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f"{digits[:3]}.{digits[3:]}"
    if len(digits) <= 9:
        return f"{digits[:3]}.{digits[3:6]}.{digits[6:]}"
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def calculate_check_digit(digits: str) -> int:
    """
    Compute the check digit that follows the given digits.

    The first digit gets weight len(digits) + 1, the last one weight 2.

    Args:
        digits: 9 digits for the first check digit, 10 for the second

    Examples:
        >>> calculate_check_digit("529982247")
        2
        >>> calculate_check_digit("5299822472")
        5
    """
    top_weight = len(digits) + 1
    total = sum(int(digit) * (top_weight - index) for index, digit in enumerate(digits))
    remainder = (total * 10) % 11
    return 0 if remainder >= 10 else remainder


def _has_valid_check_digits(digits: str) -> bool:
    if _REPEATED_DIGIT.match(digits):
        return False

    first = calculate_check_digit(digits[:CPF_BASE_LENGTH])
    if first != int(digits[CPF_BASE_LENGTH]):
        return False

    second = calculate_check_digit(digits[:CPF_BASE_LENGTH + 1])
    return second == int(digits[CPF_BASE_LENGTH + 1])


def validate_cpf(value: str | None) -> CPFValidationResult:
    """
    Validate a (possibly formatted, possibly partial) CPF.

    Outcomes:
    - empty: valid, the field is optional
    - fewer than 11 digits: invalid, CPF_INCOMPLETE_MESSAGE
    - more than 11 digits: invalid, CPF_INVALID_MESSAGE
    - all digits identical or wrong check digits: invalid, CPF_INVALID_MESSAGE
    - otherwise valid

    Returns:
        CPFValidationResult with is_valid, error_message and the masked input
    """
    digits = unformat_cpf(value)
    formatted = format_cpf(digits)

    if not digits:
        return CPFValidationResult(is_valid=True, error_message=None, formatted="")

    if len(digits) < CPF_LENGTH:
        return CPFValidationResult(is_valid=False, error_message=CPF_INCOMPLETE_MESSAGE, formatted=formatted)

    # The mask drops extra digits, the check does not
    if len(digits) > CPF_LENGTH or not _has_valid_check_digits(digits):
        return CPFValidationResult(is_valid=False, error_message=CPF_INVALID_MESSAGE, formatted=formatted)

    return CPFValidationResult(is_valid=True, error_message=None, formatted=formatted)


def is_valid_cpf(value: str | None) -> bool:
    """True only for a complete CPF with correct check digits (empty is False)."""
    digits = unformat_cpf(value)
    return len(digits) == CPF_LENGTH and _has_valid_check_digits(digits)
