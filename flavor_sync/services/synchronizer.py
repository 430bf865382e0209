"""Collection synchronizer: owns the flavor snapshot for the current identity.

Operations suspend at the remote call (blocking store calls run in the
default thread pool via ``asyncio.to_thread``) and resume with a typed
``Outcome``. The snapshot is only replaced after the store confirms, so a
failed call leaves it exactly as it was.

Overlapping calls are rejected, not queued: ``add``/``remove`` share the
``mutating`` flag and ``load`` has its own ``loading`` flag.
"""

import asyncio
import itertools
import logging
import time
from typing import Callable, Optional, Tuple

from ..core.config import Config
from ..core.errors import (
    BusyError,
    CreateError,
    DeleteError,
    FetchError,
    RemoteStoreError,
    ValidationError,
)
from ..core.models import BusyState, Flavor, Outcome, SyncState
from ..core.validation import normalize_flavor_name, validate_flavor_name
from .flavor_store import FlavorStore


logger = logging.getLogger(__name__)


class FlavorIdFactory:
    """Process-unique ids: millisecond clock plus a monotonic counter."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._counter = itertools.count(1)

    def __call__(self) -> str:
        return f"{int(self._clock() * 1000)}-{next(self._counter)}"


class CollectionSynchronizer:

    def __init__(
        self,
        store: FlavorStore,
        *,
        anonymous_owner: Optional[str] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._store = store
        self._anonymous_owner = anonymous_owner or Config.FLAVOR_ANONYMOUS_OWNER
        self._new_id = id_factory or FlavorIdFactory()
        self._snapshot: Tuple[Flavor, ...] = ()
        self._identity: Optional[str] = None
        self._loading = False
        self._mutating = False
        # Bumped on every identity transition so in-flight results can detect staleness
        self._epoch = 0

    @property
    def store(self) -> FlavorStore:
        return self._store

    @property
    def snapshot(self) -> Tuple[Flavor, ...]:
        return self._snapshot

    @property
    def identity(self) -> Optional[str]:
        return self._identity

    @property
    def busy(self) -> BusyState:
        return BusyState(loading=self._loading, mutating=self._mutating)

    def state(self) -> SyncState:
        return SyncState(identity=self._identity, busy=self.busy, flavors=self._snapshot)

    # -- Identity transitions --------------------------------------------------

    async def sign_in(self, identity: str) -> Outcome[Tuple[Flavor, ...]]:
        """Switch to ``identity``: discard the snapshot and load a fresh one."""
        self._identity = identity
        self._snapshot = ()
        self._epoch += 1
        logger.info(f"Signed in as {identity}; reloading flavors")
        return await self.load()

    def sign_out(self) -> None:
        self._identity = None
        self._snapshot = ()
        self._epoch += 1
        logger.info("Signed out; snapshot cleared")

    # -- Operations ------------------------------------------------------------

    async def load(self) -> Outcome[Tuple[Flavor, ...]]:
        if self._loading:
            logger.info("Load rejected: already loading")
            return Outcome.failure(BusyError("load"))

        self._loading = True
        epoch = self._epoch
        try:
            flavors = await asyncio.to_thread(self._store.list_flavors)
        except RemoteStoreError as e:
            logger.error(f"Failed to load flavors: {e.message}")
            error = e if isinstance(e, FetchError) else FetchError(e.message, status_code=e.status_code)
            return Outcome.failure(error)
        finally:
            self._loading = False

        if epoch != self._epoch and self._identity is None:
            logger.warning("Discarding flavors loaded before sign-out")
            return Outcome.success(self._snapshot)

        # The store does not filter by owner; scope to whoever is signed in now
        if self._identity is not None:
            flavors = [flavor for flavor in flavors if flavor.owner_id == self._identity]

        self._snapshot = _unique_flavors(flavors)
        logger.info(f"Loaded {len(self._snapshot)} flavors")
        return Outcome.success(self._snapshot)

    async def add(self, raw_name: str) -> Outcome[Flavor]:
        if self._mutating:
            logger.info("Add rejected: another change is in flight")
            return Outcome.failure(BusyError("change"))

        try:
            name = validate_flavor_name(raw_name, self._snapshot)
        except ValidationError as e:
            return Outcome.failure(e)

        flavor = Flavor(
            id=self._unused_id(),
            name=name,
            owner_id=self._identity or self._anonymous_owner,
        )

        self._mutating = True
        epoch = self._epoch
        try:
            await asyncio.to_thread(self._store.create_flavor, flavor)
        except RemoteStoreError as e:
            logger.error(f"Failed to add flavor {name!r}: {e.message}")
            error = e if isinstance(e, CreateError) else CreateError(e.message, status_code=e.status_code)
            return Outcome.failure(error)
        finally:
            self._mutating = False

        if epoch != self._epoch:
            logger.warning(f"Flavor {flavor.id} created for a previous identity; not applied")
            return Outcome.success(flavor)

        # A load that finished meanwhile may already carry the new item
        normalized = normalize_flavor_name(flavor.name)
        if any(f.id == flavor.id or normalize_flavor_name(f.name) == normalized for f in self._snapshot):
            logger.warning(f"Flavor {flavor.id} already present after reload; not appended")
            return Outcome.success(flavor)

        self._snapshot = self._snapshot + (flavor,)
        logger.info(f"Added flavor {flavor.id} ({flavor.name})")
        return Outcome.success(flavor)

    async def remove(self, flavor_id: str) -> Outcome[None]:
        if self._mutating:
            logger.info("Remove rejected: another change is in flight")
            return Outcome.failure(BusyError("change"))

        self._mutating = True
        try:
            await asyncio.to_thread(self._store.delete_flavor, flavor_id)
        except RemoteStoreError as e:
            logger.error(f"Failed to delete flavor {flavor_id}: {e.message}")
            error = e if isinstance(e, DeleteError) else DeleteError(e.message, status_code=e.status_code)
            return Outcome.failure(error)
        finally:
            self._mutating = False

        self._snapshot = tuple(flavor for flavor in self._snapshot if flavor.id != flavor_id)
        logger.info(f"Removed flavor {flavor_id}")
        return Outcome.success(None)

    def _unused_id(self) -> str:
        taken = {flavor.id for flavor in self._snapshot}
        flavor_id = self._new_id()
        while flavor_id in taken:
            flavor_id = self._new_id()
        return flavor_id


def _unique_flavors(flavors) -> Tuple[Flavor, ...]:
    """Keep the first flavor of each id and of each normalized name, preserving order."""
    seen_ids = set()
    seen_names = set()
    result = []
    for flavor in flavors:
        if flavor.id in seen_ids:
            logger.warning(f"Skipping flavor {flavor.name!r}: duplicate id {flavor.id} in store")
            continue
        normalized = normalize_flavor_name(flavor.name)
        if normalized in seen_names:
            logger.warning(f"Skipping flavor {flavor.id}: duplicate name {flavor.name!r} in store")
            continue
        seen_ids.add(flavor.id)
        seen_names.add(normalized)
        result.append(flavor)
    return tuple(result)
