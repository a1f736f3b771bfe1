from .memory import InMemoryPairRepository

__all__ = ["InMemoryPairRepository"]
