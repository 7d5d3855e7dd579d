# -*- coding: utf-8 -*-
"""
BackgroundPersistence — runs take-off saves and deletes off the UI thread.

Work is queued on a single-worker ThreadPoolExecutor, so writes to the
database happen one at a time in submission order (last write wins per
take-off id). Each job opens its own TakeoffRepository connection.

Failures never propagate into the capture session: they are printed as a
warning and reported to the optional notifier callback, and the returned
Future carries the exception for callers that want to inspect it.
"""

from concurrent.futures import ThreadPoolExecutor

from ..ledger.repository import TakeoffRepository


class BackgroundPersistence:
    """Queue of persistence jobs for one data directory.

    Args:
        data_dir: str — directory holding takeoffs.sqlite
        notifier: callable(str) or None — receives operator-facing failure
                  messages. Called from the worker thread.
        executor: concurrent.futures.Executor or None — defaults to a
                  single-worker thread pool owned by this object.
    """

    def __init__(self, data_dir, notifier=None, executor=None):
        self.data_dir = data_dir
        self._notifier = notifier
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="takeoff-save"
        )

    def set_notifier(self, notifier):
        self._notifier = notifier

    # ------------------------------------------------------------------ #
    #  Jobs
    # ------------------------------------------------------------------ #

    def submit_save(self, record):
        """Queue a save of a take-off record snapshot.

        Args:
            record: dict — Takeoff.to_record() taken on the caller's thread

        Returns:
            concurrent.futures.Future resolving to the take-off id.
        """
        future = self._executor.submit(self._save, record)
        future.add_done_callback(
            lambda f: self._report(f, f"Could not save take-off '{record.get('name', '')}'")
        )
        return future

    def submit_delete(self, takeoff_id, name=''):
        """Queue the removal of a stored take-off."""
        future = self._executor.submit(self._delete, takeoff_id)
        future.add_done_callback(
            lambda f: self._report(f, f"Could not delete take-off '{name or takeoff_id}'")
        )
        return future

    def submit_scale(self, value):
        """Queue storing the pixels-per-unit scale in app_settings."""
        future = self._executor.submit(self._set_scale, value)
        future.add_done_callback(
            lambda f: self._report(f, "Could not store the drawing scale")
        )
        return future

    def shutdown(self, wait=True):
        """Stop accepting jobs; waits for queued writes by default."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    # ------------------------------------------------------------------ #
    #  Private helpers
    # ------------------------------------------------------------------ #

    def _save(self, record):
        with TakeoffRepository(self.data_dir) as repo:
            repo.save_record(record)
        return record['id']

    def _delete(self, takeoff_id):
        with TakeoffRepository(self.data_dir) as repo:
            repo.delete(takeoff_id)
        return takeoff_id

    def _set_scale(self, value):
        with TakeoffRepository(self.data_dir) as repo:
            repo.set_scale(value)
        return value

    def _report(self, future, prefix):
        if future.cancelled():
            return
        error = future.exception()
        if error is None:
            return
        message = f"{prefix}: {error}. You can retry the save."
        print(f"Warning: {message}")
        if self._notifier:
            self._notifier(message)
