"""Engine constants.

Centralizes the fixed-point and fee parameters shared by the engines.
"""

# Fixed-point scale for spot prices (quote units per base unit * 1e18)
PRICE_SCALE = 10**18

# Fees are expressed in basis points of the input amount
FEE_DENOMINATOR = 10_000

# Largest accepted fee (a 100% fee would make every trade output zero)
MAX_SWAP_FEE_BPS = FEE_DENOMINATOR - 1

# Account that holds pooled assets in the in-memory asset bank
POOL_CUSTODY_ACCOUNT = "amm:pool-custody"
