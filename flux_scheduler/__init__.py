"""Flux print-shop scheduling engine: constraint validation and rebalancing."""

__version__ = "0.1.0"
