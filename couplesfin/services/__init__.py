"""
Services package.
Business logic over caller-supplied data (no I/O).

- fx: conversion and multi-currency aggregation over a RateTable
- cash_balance: cash account balances and spending checks
"""
from couplesfin.services.fx import FXServiceError, RateNotFoundError

__all__ = [
    "FXServiceError",
    "RateNotFoundError",
    ]
