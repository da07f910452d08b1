"""In-memory key-value store, used by tests and throwaway sessions."""

import copy
from typing import Any, Optional

from budget_tracker.services.storage.interface import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """
    Dict-backed store.

    Values are deep-copied on the way in and out so callers cannot mutate
    stored state behind the store's back, the same isolation a serializing
    backend gives.
    """

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def load(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def save(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)
