"""SQLite telemetry logger for flight recording and replay.

Records one row per simulation tick with the HUD values, the aircraft
position (Cartesian and geodetic), attitude and camera view. The data can be
used for:
- Flight analysis and debugging
- Checking the dynamics invariants over long sessions
- Flight replay
"""

import sqlite3
import time
from datetime import datetime
from typing import Any

from skyflight.core.logging_system import get_logger

logger = get_logger(__name__)

# Column order of the telemetry table (after the id primary key)
TELEMETRY_COLUMNS = (
    "timestamp_ms",
    "frame_count",
    "dt",
    "position_x",
    "position_y",
    "position_z",
    "latitude",
    "longitude",
    "altitude",
    "heading_deg",
    "pitch_deg",
    "roll_deg",
    "speed_kmh",
    "flight_phase",
    "camera_view",
    "field_of_view",
    "night_opacity",
    "distance_to_destination_km",
)


class TelemetryLogger:
    """Records flight telemetry to a SQLite database.

    Data is buffered and written in batches.
    """

    def __init__(self, db_path: str | None = None, buffer_size: int = 100, clock=time.time):
        """Initialize telemetry logger.

        Args:
            db_path: Path to SQLite database file. If None, creates in /tmp
            buffer_size: Number of records to buffer before writing to disk
            clock: Time source in seconds
        """
        if db_path is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            db_path = f"/tmp/skyflight_telemetry_{timestamp}.db"

        self.db_path = db_path
        self.buffer_size = max(1, buffer_size)
        self.buffer: list[dict[str, Any]] = []
        self.clock = clock
        self.start_time = clock()
        self.frame_count = 0

        self._init_database()

        logger.info("TelemetryLogger initialized: %s", self.db_path)

    def _init_database(self):
        """Create database schema for telemetry data."""
        conn = sqlite3.connect(self.db_path)
        try:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS telemetry (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp_ms INTEGER NOT NULL,
                    frame_count INTEGER NOT NULL,
                    dt REAL,
                    position_x REAL,
                    position_y REAL,
                    position_z REAL,
                    latitude REAL,
                    longitude REAL,
                    altitude REAL,
                    heading_deg REAL,
                    pitch_deg REAL,
                    roll_deg REAL,
                    speed_kmh REAL,
                    flight_phase TEXT,
                    camera_view TEXT,
                    field_of_view REAL,
                    night_opacity REAL,
                    distance_to_destination_km REAL
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_timestamp
                ON telemetry(timestamp_ms)
            """)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS metadata (
                    key TEXT PRIMARY KEY,
                    value TEXT
                )
            """)
            cursor.execute(
                "INSERT OR REPLACE INTO metadata (key, value) VALUES ('session_start', ?)",
                (datetime.now().isoformat(),),
            )
            conn.commit()
        finally:
            conn.close()

    def set_metadata(self, key: str, value: str) -> None:
        """Store a session metadata entry (aircraft type, departure, ...)."""
        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute(
                "INSERT OR REPLACE INTO metadata (key, value) VALUES (?, ?)", (key, str(value))
            )
            conn.commit()
        finally:
            conn.close()

    def log(self, data: dict[str, Any]):
        """Log a telemetry data point.

        Args:
            data: Telemetry values keyed by column name; unknown keys are
                  dropped.
        """
        self.frame_count += 1
        record = {key: value for key, value in data.items() if key in TELEMETRY_COLUMNS}
        record["timestamp_ms"] = int((self.clock() - self.start_time) * 1000)
        record["frame_count"] = self.frame_count

        self.buffer.append(record)

        if len(self.buffer) >= self.buffer_size:
            self.flush()

    def flush(self):
        """Write buffered data to database."""
        if not self.buffer:
            return

        placeholders = ",".join("?" for _ in TELEMETRY_COLUMNS)
        columns_str = ",".join(TELEMETRY_COLUMNS)
        rows = [[record.get(col) for col in TELEMETRY_COLUMNS] for record in self.buffer]

        conn = sqlite3.connect(self.db_path)
        try:
            conn.executemany(
                f"INSERT INTO telemetry ({columns_str}) VALUES ({placeholders})", rows
            )
            conn.commit()
        finally:
            conn.close()

        logger.debug("Flushed %d telemetry records to database", len(self.buffer))
        self.buffer.clear()

    def close(self):
        """Flush remaining data and close logger."""
        self.flush()
        logger.info(
            "TelemetryLogger closed: %d frames logged to %s", self.frame_count, self.db_path
        )

    def query(self, sql: str, params: tuple = ()) -> list[tuple]:
        """Execute a SQL query and return results.

        Args:
            sql: SQL query string
            params: Query parameters (for parameterized queries)

        Returns:
            List of tuples containing query results
        """
        conn = sqlite3.connect(self.db_path)
        try:
            return conn.execute(sql, params).fetchall()
        finally:
            conn.close()

    def read_records(self) -> list[dict[str, Any]]:
        """Return every flushed telemetry row as a dict, in frame order."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            rows = conn.execute("SELECT * FROM telemetry ORDER BY frame_count").fetchall()
            return [dict(row) for row in rows]
        finally:
            conn.close()


class TelemetryAnalyzer:
    """Summaries over a recorded flight."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def get_summary(self) -> dict[str, Any]:
        """Frame count, duration and altitude/speed envelopes of the flight."""
        conn = sqlite3.connect(self.db_path)
        try:
            row = conn.execute("""
                SELECT COUNT(*), MAX(timestamp_ms),
                       MIN(altitude), MAX(altitude),
                       MIN(speed_kmh), MAX(speed_kmh)
                FROM telemetry
            """).fetchone()
        finally:
            conn.close()

        frames, duration_ms, min_alt, max_alt, min_speed, max_speed = row
        return {
            "frames": frames,
            "duration_s": (duration_ms or 0) / 1000.0,
            "min_altitude": min_alt,
            "max_altitude": max_alt,
            "min_speed_kmh": min_speed,
            "max_speed_kmh": max_speed,
        }

    def get_view_changes(self) -> list[tuple[int, str]]:
        """Frames where the camera view changed, as (frame, view)."""
        conn = sqlite3.connect(self.db_path)
        try:
            rows = conn.execute(
                "SELECT frame_count, camera_view FROM telemetry ORDER BY frame_count"
            ).fetchall()
        finally:
            conn.close()

        changes: list[tuple[int, str]] = []
        previous = None
        for frame, view in rows:
            if view != previous:
                changes.append((frame, view))
                previous = view
        return changes
