"""
Persistent Store Adapter

The only code that talks to a KeyValueStore. It turns structured values
into JSON text and back, and it NEVER raises:

- get() returns the caller's default on a missing slot, corrupt text,
  records that fail validation, or any read error
- get_records() validates a list slot record by record, keeps the good
  ones and says whether anything was lost
- set(), remove() and clear() return False on failure

Every failure is logged, so nothing goes wrong silently. Deciding what a
failed write means for the user is left to the mutation layer.
"""

import json
from typing import Any, Optional, TypeVar

import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from programme_tracker.services.storage.interface import KeyValueStore


T = TypeVar("T")


class StoreAdapter:
    """
    Structured get/set over a key-value store.

    Pass a pydantic TypeAdapter to have values validated on read and
    dumped in their persisted (camelCase) layout on write; without one,
    plain JSON is used.
    """

    def __init__(self, store: KeyValueStore):
        self._store = store
        self._logger = structlog.get_logger()

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def get(
        self,
        key: str,
        default: T,
        adapter: Optional[TypeAdapter] = None,
    ) -> T:
        """
        Read and decode a slot.

        Returns:
            The decoded value, or default if it cannot be produced
        """
        try:
            raw = self._store.get_item(key)
        except Exception as e:
            self._logger.error("store_read_failed", key=key, error=str(e))
            return default

        if raw is None:
            self._logger.debug("store_slot_missing", key=key)
            return default

        try:
            if adapter is not None:
                return adapter.validate_json(raw)
            return json.loads(raw)
        except Exception as e:
            self._logger.error(
                "store_read_failed",
                key=key,
                error=str(e),
                reason="corrupt_data",
            )
            return default

    def get_records(
        self,
        key: str,
        item_adapter: TypeAdapter,
    ) -> tuple[list, bool]:
        """
        Read a slot holding a JSON list, validating each record on its own.

        Records that fail validation are logged and skipped; the others
        are still returned.

        Returns:
            (records, complete) where complete is False if the slot exists
            but anything in it could not be read
        """
        try:
            raw = self._store.get_item(key)
        except Exception as e:
            self._logger.error("store_read_failed", key=key, error=str(e))
            return [], False

        if raw is None:
            self._logger.debug("store_slot_missing", key=key)
            return [], True

        try:
            data = json.loads(raw)
        except ValueError as e:
            self._logger.error(
                "store_read_failed",
                key=key,
                error=str(e),
                reason="corrupt_data",
            )
            return [], False

        if not isinstance(data, list):
            self._logger.error(
                "store_read_failed",
                key=key,
                error=f"expected a list, found {type(data).__name__}",
                reason="corrupt_data",
            )
            return [], False

        records = []
        complete = True
        for index, item in enumerate(data):
            try:
                records.append(item_adapter.validate_python(item))
            except PydanticValidationError as e:
                complete = False
                self._logger.error(
                    "store_record_skipped",
                    key=key,
                    index=index,
                    error_count=e.error_count(),
                    error=str(e.errors()[0]["msg"]),
                )
        return records, complete

    def set(
        self,
        key: str,
        value: Any,
        adapter: Optional[TypeAdapter] = None,
    ) -> bool:
        """
        Encode and write a slot.

        Returns:
            True if written; False if encoding or writing failed, in which
            case the previously stored value is unchanged
        """
        try:
            if adapter is not None:
                text = adapter.dump_json(
                    value, by_alias=True, exclude_none=True
                ).decode("utf-8")
            else:
                text = json.dumps(value)
            self._store.set_item(key, text)
        except Exception as e:
            self._logger.error(
                "store_write_failed",
                key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        self._logger.debug("store_slot_written", key=key, size=len(text))
        return True

    def remove(self, key: str) -> bool:
        """Delete a slot. Returns False on failure."""
        try:
            self._store.remove_item(key)
        except Exception as e:
            self._logger.error("store_remove_failed", key=key, error=str(e))
            return False
        return True

    def clear(self) -> bool:
        """Delete every slot. Returns False on failure."""
        try:
            self._store.clear()
        except Exception as e:
            self._logger.error("store_clear_failed", error=str(e))
            return False
        return True
