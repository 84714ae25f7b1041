"""pipwatch.market

Price feed boundary: sources, the synthetic fallback, and loading.
"""

from pipwatch.market.quotes import (
    AlphaVantageSource,
    PriceSource,
    SyntheticSource,
    load_prices,
    parse_fx_intraday,
    synthetic_series,
)

__all__ = [
    "AlphaVantageSource",
    "PriceSource",
    "SyntheticSource",
    "load_prices",
    "parse_fx_intraday",
    "synthetic_series",
]
