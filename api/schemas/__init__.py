from api.schemas.common import ErrorResponse
from api.schemas.signals import (
    MonitorResponse,
    SignalPointResponse,
    SimulationResponse,
    StatsResponse,
    TradeResponse,
)

__all__ = [
    "ErrorResponse",
    "MonitorResponse",
    "SignalPointResponse",
    "SimulationResponse",
    "StatsResponse",
    "TradeResponse",
]
