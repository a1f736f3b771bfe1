"""
Core module - Protocols, containers, and abstractions.
"""
from .protocols import PairRepository
from .container import ServiceContainer

__all__ = [
    "PairRepository",
    "ServiceContainer",
]
