"""
Standard type definitions for database models.

Provides consistent types for monetary and rate fields across all models.
"""

from sqlalchemy import DECIMAL

# Standard money type for transaction amounts, commissions and payouts
# Precision: 12 digits total, 2 after decimal point
# Range: up to 9,999,999,999.99
MoneyType = DECIMAL(12, 2)

# Commission rate stored as a fraction
# Precision: 6 digits total, 4 after decimal point
# Suitable for: 0.1000 (10%), 0.0750 (7.5%)
RateType = DECIMAL(6, 4)
