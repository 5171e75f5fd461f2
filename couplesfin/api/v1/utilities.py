"""
Utility endpoints for frontend support.

Provides helper endpoints called by form fields:
- Currency listing with localized names and symbols
- Amount parsing and display formatting
- CPF mask and validation
"""
from fastapi import APIRouter, Query

from couplesfin.schemas.documents import CPFValidationRequest, CPFValidationResult
from couplesfin.schemas.utilities import (
    CurrencyListResponse,
    MoneyFormatRequest,
    MoneyFormatResponse,
    MoneyParseRequest,
    MoneyParseResponse,
    )
from couplesfin.utils import money_math
from couplesfin.utils.cpf_utils import validate_cpf
from couplesfin.utils.currency_utils import format_currency, format_currency_compact, list_currencies

router = APIRouter(prefix="/utilities", tags=["Utilities"])


@router.get("/currencies", response_model=CurrencyListResponse)
async def get_currencies(
    language: str = Query("pt", description="Language for currency names (default: pt)")
    ):
    """
    Get the supported currencies with localized names and symbols.

    **Example Request**:
    ```
    GET /api/v1/utilities/currencies?language=en
    ```

    **Response**:
    ```json
    {
      "currencies": [
        {"code": "BRL", "symbol": "R$", "name": "Brazilian Real"},
        {"code": "USD", "symbol": "$", "name": "US Dollar"},
        ...
      ],
      "count": 4,
      "language": "en"
    }
    ```
    """
    currencies = list_currencies(language)
    return CurrencyListResponse(currencies=currencies, count=len(currencies), language=language)


@router.post("/money/parse", response_model=MoneyParseResponse)
async def parse_amount(request: MoneyParseRequest):
    """
    Parse an amount typed in a form field.

    Unreadable input yields 0, never an error, so the field stays editable.

    **Example Request**:
    ```json
    {"value": "R$ 1.234,56"}
    ```

    **Response**:
    ```json
    {"query": "R$ 1.234,56", "amount": "1234.56", "rounded": "1234.56"}
    ```
    """
    amount = money_math.parse(request.value)
    return MoneyParseResponse(query=request.value, amount=amount, rounded=money_math.round_amount(amount))


@router.post("/money/format", response_model=MoneyFormatResponse)
async def format_amount(request: MoneyFormatRequest):
    """
    Format an amount for display in the requested locale.

    **Example Request**:
    ```json
    {"amount": "1234.5", "currency": "BRL", "locale": "pt_BR"}
    ```

    **Response**:
    ```json
    {"formatted": "R$ 1.234,50", "amount": "1234.50", "currency": "BRL"}
    ```
    """
    if request.compact:
        formatted = format_currency_compact(request.amount, request.currency, request.locale)
    else:
        formatted = format_currency(request.amount, request.currency, request.locale)

    return MoneyFormatResponse(
        formatted=formatted,
        amount=money_math.round_amount(request.amount),
        currency=request.currency,
        )


@router.post("/cpf/validate", response_model=CPFValidationResult)
async def validate_cpf_endpoint(request: CPFValidationRequest):
    """
    Validate and re-mask a CPF.

    Always answers 200: an invalid CPF is a field state, not a request error.

    **Example Request**:
    ```json
    {"cpf": "52998224725"}
    ```

    **Response**:
    ```json
    {"is_valid": true, "error_message": null, "formatted": "529.982.247-25"}
    ```
    """
    return validate_cpf(request.cpf)
