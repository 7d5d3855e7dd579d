# -*- coding: utf-8 -*-
"""
TakeoffRepository — persistence boundary for the take-off ledger.

Encapsulates the connection lifecycle of the take-off database. Higher layers
(use cases) never import TakeoffStore directly. Each `with` block opens and
closes its own connection, so a repository can be used from the save worker
thread as well as from the UI thread.
"""

from ..domain.models.takeoff import Takeoff


class TakeoffRepository:
    """Thin wrapper around TakeoffStore working with domain objects.

    Usage (as context manager):
        with TakeoffRepository(data_dir) as repo:
            repo.save_record(takeoff.to_record())
            takeoffs = repo.load_all()
    """

    def __init__(self, data_dir):
        self.data_dir = data_dir
        self._store = None

    # ------------------------------------------------------------------ #
    #  Lifecycle
    # ------------------------------------------------------------------ #

    def open(self):
        """Open the take-off database."""
        from ...takeoff_store import TakeoffStore
        self._store = TakeoffStore(self.data_dir)
        self._store.connect()

    def close(self):
        """Close the take-off database."""
        if self._store:
            self._store.disconnect()
            self._store = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # never suppress exceptions

    # ------------------------------------------------------------------ #
    #  Take-offs
    # ------------------------------------------------------------------ #

    def save_record(self, record):
        """Write a take-off record snapshot (last write wins per id)."""
        self._store.save_takeoff(record)

    def load(self, takeoff_id):
        """Return the stored Takeoff or None."""
        record = self._store.get_takeoff(takeoff_id)
        return self._to_takeoff(record) if record else None

    def load_all(self):
        """Return every stored Takeoff in creation order."""
        takeoffs = (self._to_takeoff(r) for r in self._store.get_all_takeoffs())
        return [t for t in takeoffs if t is not None]

    def _to_takeoff(self, record):
        """Takeoff for a stored record, or None when the record is malformed."""
        try:
            return Takeoff.from_record(record)
        except (KeyError, TypeError, ValueError) as e:
            print(f"Warning: Skipping malformed take-off {record.get('id', '?')}: {e}")
            return None

    def delete(self, takeoff_id):
        self._store.delete_takeoff(takeoff_id)

    # ------------------------------------------------------------------ #
    #  Scale setting
    # ------------------------------------------------------------------ #

    def get_scale(self):
        return self._store.get_pixels_per_unit()

    def set_scale(self, value):
        self._store.set_app_setting('pixels_per_unit', float(value))
