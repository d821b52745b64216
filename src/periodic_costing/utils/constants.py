"""
Constants for the Periodic Costing engine.

This module defines:
- Database file name and environment variable names
- Cost precision and rounding
- Default stock unit values
"""

from decimal import Decimal, ROUND_HALF_EVEN

# ============================================================================
# Storage
# ============================================================================

DATABASE_FILENAME = "periodic_costing.db"

# ============================================================================
# Cost Precision
# ============================================================================

# Unit costs and settled portion costs are rounded to 2 decimal places
COST_QUANTUM = Decimal("0.01")

# Banker's rounding, matching the point of sale's money arithmetic
COST_ROUNDING = ROUND_HALF_EVEN

# Ledger quantities are stored with 6 decimal places
QUANTITY_QUANTUM = Decimal("0.000001")

# ============================================================================
# Stock Units
# ============================================================================

# Multiplier used when an inventory item has no transaction unit
DEFAULT_UNIT_MULTIPLIER = Decimal("1")

# Environment variable names
ENV_ENVIRONMENT = "PERIODIC_COSTING_ENV"
ENV_DATABASE_URL = "PERIODIC_COSTING_DATABASE_URL"
