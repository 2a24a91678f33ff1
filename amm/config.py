"""Engine configuration."""

import os
from dataclasses import dataclass

from amm.constants import MAX_SWAP_FEE_BPS, PRICE_SCALE


@dataclass(frozen=True)
class EngineConfig:
    """Centralized configuration for the pool engines.

    Attributes:
        price_scale: Fixed-point scale of spot prices (default: 1e18)
        swap_fee_bps: Fee taken from swap inputs, in basis points, and left in
            the reserves. The default of 0 keeps the plain constant-product
            output formula.
    """

    price_scale: int = PRICE_SCALE
    swap_fee_bps: int = 0

    def __post_init__(self) -> None:
        if self.price_scale <= 0:
            raise ValueError(f"price_scale must be positive, got {self.price_scale}")
        if not (0 <= self.swap_fee_bps <= MAX_SWAP_FEE_BPS):
            raise ValueError(
                f"swap_fee_bps must be in [0, {MAX_SWAP_FEE_BPS}], got {self.swap_fee_bps}"
            )

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a configuration from environment variables.

        - AMM_SWAP_FEE_BPS: swap fee in basis points (default: 0)
        - AMM_PRICE_SCALE: spot price scale (default: 10**18)
        """
        return cls(
            price_scale=int(os.environ.get("AMM_PRICE_SCALE", str(PRICE_SCALE))),
            swap_fee_bps=int(os.environ.get("AMM_SWAP_FEE_BPS", "0")),
        )


# Default configuration instance
DEFAULT_ENGINE_CONFIG = EngineConfig()
