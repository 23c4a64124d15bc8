"""
Markers domain package.

Public API:
- Domain models: Marker, Bounded, Unbounded, UNBOUNDED, is_expired
- Lifecycle: MarkerManager and its exceptions
- Persistence: MemoryStore, JsonFileStore
"""
from .models import Marker, Bounded, Unbounded, UNBOUNDED, LatLon, is_expired
from .policy import MarkerPolicy, default_marker_policy
from .store import KeyValueStore, MemoryStore, JsonFileStore
from .lifecycle import (
    MarkerManager,
    MarkerStateException,
    NoLocationException,
    AlreadyActiveException,
)

__all__ = ["Marker",
           "Bounded",
             "Unbounded",
               "UNBOUNDED",
               "LatLon",
               "is_expired",
               "MarkerPolicy",
               "default_marker_policy",
               "KeyValueStore",
               "MemoryStore",
               "JsonFileStore",
               "MarkerManager",
               "MarkerStateException",
               "NoLocationException",
               "AlreadyActiveException",
               ]
