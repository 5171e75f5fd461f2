"""
Utility functions for couplesfin.

This package contains:
- money_math: cent-exact arithmetic and permissive amount parsing
- cpf_utils: CPF mask and checksum validation
- currency_utils: localized currency names, symbols and formatting (Babel)
- validation_utils: reusable Pydantic field validators
"""
