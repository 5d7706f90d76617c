"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/registry.py
Thread-safe registry of physical identities that have already been counted.
One registry lives for exactly one top-level computation.
"""

import threading
from typing import List, Set

from treesize.core.interfaces import IdentityRegistry
from treesize.core.models import PhysicalIdentity


class IdentityRegistryImpl(IdentityRegistry):
    """
    Set of claimed identities split into lock-guarded shards.

    With the default single shard this is a plain set behind one lock; more
    shards reduce contention when many workers claim at once. An identity always
    maps to the same shard, so check-and-insert stays atomic per identity.
    """

    def __init__(self, shards: int = 1):
        if shards < 1:
            raise ValueError("Registry needs at least one shard")
        self._locks: List[threading.Lock] = [threading.Lock() for _ in range(shards)]
        self._shards: List[Set[PhysicalIdentity]] = [set() for _ in range(shards)]

    def claim(self, identity: PhysicalIdentity) -> bool:
        index = hash(identity) % len(self._shards)
        with self._locks[index]:
            seen = self._shards[index]
            if identity in seen:
                return False
            seen.add(identity)
            return True

    def __contains__(self, identity: PhysicalIdentity) -> bool:
        index = hash(identity) % len(self._shards)
        with self._locks[index]:
            return identity in self._shards[index]

    def __len__(self) -> int:
        total = 0
        for lock, seen in zip(self._locks, self._shards):
            with lock:
                total += len(seen)
        return total

    def __repr__(self):
        return f"<IdentityRegistryImpl shards={len(self._shards)}, claimed={len(self)}>"
