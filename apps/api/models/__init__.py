"""Models package."""

from .store_entry import StoreEntry
