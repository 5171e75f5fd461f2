"""
Couples Finance core.

Exact monetary arithmetic, currency conversion over caller-supplied rate
tables, CPF validation and a thin HTTP layer exposing them to form and
balance components.
"""
__version__ = "0.1.0"
