"""
Service Layer Package

- ProgressStore: the single read/write surface over a player's progress
- AppOpenTracker: background accumulation of app-open minutes
- ServiceContainer: wiring of storage, catalog and clock into stores
"""

from progression.services.progress_service import ProgressStore, parse_snapshot, serialize_snapshot
from progression.services.app_open_tracker import AppOpenTracker
from progression.services.container import ServiceContainer

__all__ = [
    "ProgressStore",
    "parse_snapshot",
    "serialize_snapshot",
    "AppOpenTracker",
    "ServiceContainer",
]
