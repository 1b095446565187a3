"""Small shared helpers."""
from .locks import ReadWriteLock

__all__ = ["ReadWriteLock"]
