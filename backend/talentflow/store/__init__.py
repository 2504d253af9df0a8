from .base import Collection, Operation, Put, Store, Update
from .memory import MemoryStore

__all__ = ["Collection", "MemoryStore", "Operation", "Put", "Store", "Update"]
