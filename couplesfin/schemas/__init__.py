"""
Pydantic schemas for couplesfin.

Used across the utilities, services and the HTTP layer to validate data
structures and standardize data exchange between components.

**Organization by Domain**:
- common.py: Shared schemas (Currency, BaseBulkResponse)
- fx.py: Exchange rates, rate tables, conversion and aggregation requests
- documents.py: CPF validation result
- accounts.py: Cash accounts and balance summaries
- profile.py: User profile update payload
- utilities.py: Small request/response models for the utilities endpoints

**Naming Conventions**:
- FX prefix: Foreign Exchange (currency rates)
- CPF prefix: Brazilian individual taxpayer number

Import from the submodules directly: this package does not re-export,
so utils modules can depend on schemas without import cycles.
"""
