"""
Service Container - Dependency Injection Container

Wires storage, catalog, clock and profile provider into progress stores.
The catalog is lazy-loaded on first access; one ProgressStore is kept
per user so all mutations for that user share one writer lock.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional
import logging

from progression.catalog.repository import CatalogRepository, JsonCatalogRepository
from progression.services.progress_service import ProfileProvider, ProgressStore
from progression.storage.snapshot_store import SnapshotStorage
from progression.utils.datetime_helpers import Clock, default_clock

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for progression services.

    Infrastructure dependencies (storage, clock) are injected; the catalog
    is injected or lazy-loaded from CATALOG_PATH.
    """

    storage: SnapshotStorage
    clock: Clock = default_clock
    catalog_repository: Optional[CatalogRepository] = None

    _stores: Dict[str, ProgressStore] = field(default_factory=dict, init=False, repr=False)

    @property
    def catalog(self) -> CatalogRepository:
        """Get the content catalog (lazy-loaded)"""
        if self.catalog_repository is None:
            self.catalog_repository = JsonCatalogRepository()
            logger.debug("JsonCatalogRepository instantiated")
        return self.catalog_repository

    async def progress_store(
        self,
        user_id: str,
        profile_provider: Optional[ProfileProvider] = None
    ) -> ProgressStore:
        """
        Get the loaded ProgressStore for a user, creating it on first use

        Args:
            user_id: Player id
            profile_provider: Profile source for the daily workout (first call only)

        Returns:
            ProgressStore with its snapshot loaded
        """
        store = self._stores.get(user_id)
        if store is None:
            store = ProgressStore(
                user_id=user_id,
                storage=self.storage,
                catalog=self.catalog,
                clock=self.clock,
                profile_provider=profile_provider,
            )
            self._stores[user_id] = store
            logger.debug(f"ProgressStore instantiated for user {user_id}")

        if not store.is_loaded:
            await store.load()
        return store

    async def close(self) -> None:
        await self.storage.close()
        self._stores.clear()
