"""Flowise prediction adapter."""

from relay.adapters.flowise.client import (
    FlowiseClient,
    PredictionError,
    PredictionRequest,
    TransientPredictionError,
)

__all__ = [
    "FlowiseClient",
    "PredictionError",
    "PredictionRequest",
    "TransientPredictionError",
]
