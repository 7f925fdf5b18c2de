"""dotstore: path-addressed reactive state stores for Python."""

from importlib.metadata import version as _version

__version__ = _version("dotstore")

from dotstore.errors import DotStoreError, MalformedInstructionError, StoreUsageError
from dotstore.store import Store, create_store
from dotstore.map_store import KeyHandle, MapStore, create_map_store
from dotstore.scoped import ScopedStore, create_scoped_map_store, create_scoped_store
from dotstore.reaction import Reaction, keys_reaction, reaction, size_reaction
# textual NOT auto-imported — opt-in only

__all__ = [
    "Store",
    "create_store",
    "MapStore",
    "KeyHandle",
    "create_map_store",
    "ScopedStore",
    "create_scoped_store",
    "create_scoped_map_store",
    "Reaction",
    "reaction",
    "keys_reaction",
    "size_reaction",
    "DotStoreError",
    "StoreUsageError",
    "MalformedInstructionError",
]
