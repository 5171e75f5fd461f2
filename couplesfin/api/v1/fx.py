"""
FX API endpoints.

Conversion and aggregation over a rate table sent with the request.
The server keeps no rates of its own.
"""
from fastapi import APIRouter, HTTPException

from couplesfin.logging_config import get_logger
from couplesfin.schemas.fx import (
    FXAggregateRequest,
    FXAggregateResponse,
    FXConversionResult,
    FXConvertRequest,
    FXConvertResponse,
    )
from couplesfin.services.fx import RateNotFoundError, aggregate_across_currencies, convert_bulk, max_rate_age

logger = get_logger(__name__)

fx_router = APIRouter(prefix="/fx", tags=["FX"])


@fx_router.post("/convert", response_model=FXConvertResponse)
async def convert_currency_bulk(request: FXConvertRequest):
    """
    Convert one or more amounts between currencies (bulk operation).

    Each conversion uses the direct rate, the inverse rate, or a path through
    the table's base currency. Conversions without a path are reported in
    `errors` and their result has `converted_amount: null`.

    **Example Request**:
    ```json
    {
      "conversions": [{"amount": "100", "from": "BRL", "to": "USD"}],
      "rate_table": {
        "base_currency": "BRL",
        "rates": [{"base": "BRL", "quote": "USD", "rate": "0.19", "updated_at": "2026-10-19T09:00:00Z"}]
      }
    }
    ```

    Returns:
        Per-conversion results; 404 if every conversion failed
    """
    rate_table = request.rate_table
    bulk_results, bulk_errors = convert_bulk(
        [(item.amount, item.from_currency, item.to_currency) for item in request.conversions],
        rate_table,
        raise_on_error=False,
        )

    results = []
    for item, converted_amount in zip(request.conversions, bulk_results):
        rate = None
        error = None
        if converted_amount is None:
            error = str(RateNotFoundError(item.from_currency, item.to_currency))
        elif item.from_currency != item.to_currency:
            rate = rate_table.get_rate(item.from_currency, item.to_currency)

        results.append(FXConversionResult(
            amount=item.amount,
            from_currency=item.from_currency,
            to_currency=item.to_currency,
            converted_amount=converted_amount,
            rate=rate,
            error=error,
            ))

    success_count = len([r for r in results if r.converted_amount is not None])

    # If all conversions failed, return 404
    if bulk_errors and success_count == 0:
        raise HTTPException(
            status_code=404,
            detail=f"All conversions failed: {'; '.join(bulk_errors)}"
            )

    return FXConvertResponse(
        results=results,
        success_count=success_count,
        errors=bulk_errors,
        rates_last_updated=rate_table.last_updated,
        stale=rate_table.is_stale(max_rate_age()),
        )


@fx_router.post("/aggregate", response_model=FXAggregateResponse)
async def aggregate_amounts(request: FXAggregateRequest):
    """
    Total amounts held in several currencies, in one target currency.

    **Example Request**:
    ```json
    {
      "items": [{"amount": "10", "currency": "USD"}, {"amount": "5", "currency": "EUR"}],
      "target_currency": "USD",
      "rate_table": {"base_currency": "USD", "rates": [{"base": "USD", "quote": "EUR", "rate": "0.5"}]}
    }
    ```

    **Response**:
    ```json
    {"total": "20.00", "currency": "USD", "item_count": 2}
    ```

    Returns:
        Total; 404 if any item currency has no rate path to the target
    """
    try:
        total = aggregate_across_currencies(
            [(item.amount, item.currency) for item in request.items],
            request.target_currency,
            request.rate_table,
            )
    except RateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    logger.debug("Aggregated amounts", item_count=len(request.items), currency=request.target_currency)
    return FXAggregateResponse(total=total, currency=request.target_currency, item_count=len(request.items))
