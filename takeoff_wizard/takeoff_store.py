# -*- coding: utf-8 -*-
"""
Take-off Store Module
Persists take-off records and their measurements in a takeoffs.sqlite
database inside the data directory, plus a single-row app_settings table
holding operator configuration (the pixels-per-unit scale).

Records use the shape produced by Takeoff.to_record():
    {id, name, kind, quantity, status, unit, measurements: [...],
     wbs_element, drawing, locked}
"""

import json
import os
import sqlite3
from datetime import datetime

from .geometry_utils import validate_scale

DB_FILENAME = "takeoffs.sqlite"
DEFAULT_PIXELS_PER_UNIT = 100.0


class TakeoffStore:
    """Manages take-off records and app settings in takeoffs.sqlite."""

    def __init__(self, data_dir):
        self.data_dir = data_dir
        self.db_path = os.path.join(data_dir, DB_FILENAME)
        self.connection = None

    # ------------------------------------------------------------------ #
    #  Connection
    # ------------------------------------------------------------------ #

    def connect(self):
        """Open SQLite connection and ensure the schema exists.

        Raises:
            RuntimeError: the database cannot be opened or initialised.
        """
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            self.connection = sqlite3.connect(self.db_path)
            self.connection.execute("PRAGMA foreign_keys = ON")
            self._create_tables()
            self._migrate_schema()
        except (OSError, sqlite3.Error) as e:
            self.disconnect()
            raise RuntimeError(f"Could not open take-off database {self.db_path}: {e}")

    def disconnect(self):
        """Close the SQLite connection."""
        if self.connection:
            self.connection.close()
            self.connection = None

    def _create_tables(self):
        """Create all tables if they do not exist (new-database schema)."""
        cursor = self.connection.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS takeoffs (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                kind TEXT NOT NULL CHECK(kind IN ('area', 'linear', 'count')),
                quantity TEXT DEFAULT '0',
                status TEXT DEFAULT 'pending',
                unit TEXT DEFAULT '',
                wbs_element TEXT DEFAULT '',
                drawing TEXT DEFAULT '',
                locked INTEGER DEFAULT 0,
                created_at TEXT DEFAULT CURRENT_TIMESTAMP,
                updated_at TEXT DEFAULT ''
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS measurements (
                id TEXT PRIMARY KEY,
                takeoff_id TEXT NOT NULL,
                position INTEGER NOT NULL,
                kind TEXT NOT NULL,
                label TEXT NOT NULL,
                value REAL NOT NULL,
                unit TEXT DEFAULT '',
                geometry TEXT DEFAULT '[]',
                scale REAL NOT NULL,
                source TEXT DEFAULT 'manual',
                created_at TEXT DEFAULT '',
                FOREIGN KEY (takeoff_id) REFERENCES takeoffs(id) ON DELETE CASCADE
            )
        """)

        # App settings: single-row config table
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS app_settings (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                pixels_per_unit REAL DEFAULT 100.0
            )
        """)
        cursor.execute("INSERT OR IGNORE INTO app_settings (id) VALUES (1)")

        self.connection.commit()
        cursor.close()

    def _migrate_schema(self):
        """Apply incremental schema migrations for existing databases (idempotent)."""
        migrations = [
            # (table, column, definition)
            ("takeoffs",     "wbs_element",  "TEXT DEFAULT ''"),
            ("takeoffs",     "drawing",      "TEXT DEFAULT ''"),
            ("takeoffs",     "locked",       "INTEGER DEFAULT 0"),
            ("measurements", "source",       "TEXT DEFAULT 'manual'"),
        ]
        cursor = self.connection.cursor()
        for table, column, definition in migrations:
            try:
                cursor.execute(
                    f'ALTER TABLE {table} ADD COLUMN {column} {definition}'
                )
            except sqlite3.OperationalError:
                pass  # column already exists
        self.connection.commit()
        cursor.close()

    # ------------------------------------------------------------------ #
    #  Take-offs
    # ------------------------------------------------------------------ #

    def save_takeoff(self, record):
        """Insert or replace a take-off record and its measurements.

        The take-off row and its measurement rows are written in a single
        transaction; a failure leaves the previous version in place.

        Raises:
            RuntimeError: the write failed.
        """
        self._ensure_connected()
        cursor = self.connection.cursor()
        try:
            cursor.execute(
                """INSERT INTO takeoffs
                   (id, name, kind, quantity, status, unit, wbs_element,
                    drawing, locked, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET
                       name = excluded.name, kind = excluded.kind,
                       quantity = excluded.quantity, status = excluded.status,
                       unit = excluded.unit, wbs_element = excluded.wbs_element,
                       drawing = excluded.drawing, locked = excluded.locked,
                       updated_at = excluded.updated_at""",
                (record['id'], record['name'], record['kind'],
                 record.get('quantity', '0'), record.get('status', 'pending'),
                 record.get('unit', ''), record.get('wbs_element', ''),
                 record.get('drawing', ''), int(bool(record.get('locked', False))),
                 datetime.now().isoformat(timespec='seconds'))
            )
            cursor.execute("DELETE FROM measurements WHERE takeoff_id = ?", (record['id'],))
            for position, m in enumerate(record.get('measurements', [])):
                cursor.execute(
                    """INSERT INTO measurements
                       (id, takeoff_id, position, kind, label, value, unit,
                        geometry, scale, source, created_at)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (m['id'], record['id'], position, m['kind'], m['label'],
                     m['value'], m.get('unit', ''), json.dumps(m.get('geometry', [])),
                     m['scale'], m.get('source', 'manual'), m.get('created_at', ''))
                )
            self.connection.commit()
        except sqlite3.Error as e:
            self.connection.rollback()
            raise RuntimeError(f"Could not save take-off '{record.get('name', '')}': {e}")
        finally:
            cursor.close()

    def get_takeoff(self, takeoff_id):
        """Return a single take-off record (with measurements) or None."""
        self._ensure_connected()
        cursor = self.connection.cursor()
        cursor.execute(
            """SELECT id, name, kind, quantity, status, unit, wbs_element,
                      drawing, locked
               FROM takeoffs WHERE id = ?""",
            (takeoff_id,)
        )
        row = cursor.fetchone()
        cursor.close()
        return self._row_to_takeoff(row) if row else None

    def get_all_takeoffs(self):
        """Return list of take-off records in creation order."""
        self._ensure_connected()
        cursor = self.connection.cursor()
        cursor.execute(
            """SELECT id, name, kind, quantity, status, unit, wbs_element,
                      drawing, locked
               FROM takeoffs ORDER BY created_at, rowid"""
        )
        rows = cursor.fetchall()
        cursor.close()
        return [self._row_to_takeoff(r) for r in rows]

    def delete_takeoff(self, takeoff_id):
        """Permanently delete a take-off record (cascades to measurements)."""
        self._ensure_connected()
        cursor = self.connection.cursor()
        try:
            cursor.execute("DELETE FROM takeoffs WHERE id = ?", (takeoff_id,))
            self.connection.commit()
        except sqlite3.Error as e:
            self.connection.rollback()
            raise RuntimeError(f"Could not delete take-off {takeoff_id}: {e}")
        finally:
            cursor.close()

    def _get_measurements(self, takeoff_id):
        cursor = self.connection.cursor()
        cursor.execute(
            """SELECT id, kind, label, value, unit, geometry, scale, source, created_at
               FROM measurements WHERE takeoff_id = ? ORDER BY position""",
            (takeoff_id,)
        )
        rows = cursor.fetchall()
        cursor.close()
        measurements = []
        for r in rows:
            try:
                geometry = json.loads(r[5]) if r[5] else []
            except (json.JSONDecodeError, TypeError):
                print(f"Warning: Could not read geometry of measurement {r[0]}")
                geometry = []
            measurements.append({
                'id': r[0], 'kind': r[1], 'label': r[2], 'value': r[3],
                'unit': r[4], 'geometry': geometry, 'scale': r[6],
                'source': r[7], 'created_at': r[8],
            })
        return measurements

    def _row_to_takeoff(self, r):
        """Convert a takeoffs DB row tuple to a record dict."""
        return {
            'id': r[0], 'name': r[1], 'kind': r[2],
            'quantity': r[3], 'status': r[4], 'unit': r[5],
            'wbs_element': r[6] or '', 'drawing': r[7] or '',
            'locked': bool(r[8]),
            'measurements': self._get_measurements(r[0]),
        }

    # ------------------------------------------------------------------ #
    #  App Settings
    # ------------------------------------------------------------------ #

    def get_app_setting(self, key, default=None):
        """Return a value from the app_settings row (column = key).

        Valid keys: pixels_per_unit
        """
        self._ensure_connected()
        cursor = self.connection.cursor()
        try:
            cursor.execute(f'SELECT "{key}" FROM app_settings WHERE id = 1')
            row = cursor.fetchone()
            return row[0] if row and row[0] is not None else default
        except sqlite3.OperationalError:
            return default
        finally:
            cursor.close()

    def set_app_setting(self, key, value):
        """Update a single column in the app_settings row."""
        self._ensure_connected()
        cursor = self.connection.cursor()
        try:
            cursor.execute(
                f'UPDATE app_settings SET "{key}" = ? WHERE id = 1', (value,)
            )
            self.connection.commit()
        except sqlite3.Error as e:
            raise RuntimeError(f"Could not store setting '{key}': {e}")
        finally:
            cursor.close()

    def get_pixels_per_unit(self):
        """Stored scale, falling back to the default for unreadable values."""
        value = self.get_app_setting('pixels_per_unit', DEFAULT_PIXELS_PER_UNIT)
        try:
            return validate_scale(value)
        except ValueError:
            print(f"Warning: Ignoring stored scale {value!r}, using default")
            return DEFAULT_PIXELS_PER_UNIT

    # ------------------------------------------------------------------ #
    #  Utilities
    # ------------------------------------------------------------------ #

    def _ensure_connected(self):
        if self.connection is None:
            raise RuntimeError("Not connected to database. Call connect() first.")


def default_data_dir():
    """Data directory from TAKEOFF_WIZARD_DATA_DIR, else ~/.takeoff_wizard."""
    return os.environ.get("TAKEOFF_WIZARD_DATA_DIR") or os.path.join(
        os.path.expanduser("~"), ".takeoff_wizard"
    )
