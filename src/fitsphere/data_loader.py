"""Loading recorded sensor sessions and replaying them as a live platform."""

import asyncio
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import polars as pl
import structlog

from .errors import CapabilityUnavailable
from .platform import Capabilities, Platform, PositionWatchOptions, RawListener, Unsubscribe
from .tick_sources import wall_clock_ms

logger = structlog.get_logger(__name__)

TIME_COLUMN = 'Time'  # seconds
ACCEL_COLUMNS = ['Accel X', 'Accel Y', 'Accel Z']  # m/s^2, gravity included
HEADING_COLUMN = 'Heading'  # degrees
LOCATION_COLUMNS = ['Latitude', 'Longitude']
POSITION_REFRESH_S = 1.0  # Longest gap between fixes while the location is unchanged


class RecordingLoader:
    """Handles loading and validation of recorded session files."""
    
    SUFFIXES = ('.parquet', '.csv')
    
    def __init__(self, data_dir: Path):
        """
        Initialize the recording loader.
        
        Args:
            data_dir: Directory containing recorded sessions (parquet or CSV)
        """
        self.data_dir = Path(data_dir)
    
    def get_available_sessions(self) -> List[str]:
        """
        List recorded session names found in the data directory.
        
        Returns:
            Sorted list of session names (file stems)
        """
        if not self.data_dir.is_dir():
            return []
        names = {f.stem for f in self.data_dir.iterdir() if f.suffix in self.SUFFIXES}
        return sorted(names)
    
    def get_file_path(self, session_id: str) -> Path:
        """
        Get the file path for a session, preferring parquet over CSV.
        
        Raises:
            FileNotFoundError: If no file exists for the session
        """
        for suffix in self.SUFFIXES:
            path = self.data_dir / f"{session_id}{suffix}"
            if path.exists():
                return path
        raise FileNotFoundError(f"Recording not found for session {session_id}")
    
    def load_session(self, session_id: str) -> pl.DataFrame:
        """
        Load a recorded session sorted by time.
        
        Args:
            session_id: Session identifier
            
        Returns:
            DataFrame with a 'Time' column and any sensor columns present
            
        Raises:
            FileNotFoundError: If the recording doesn't exist
            ValueError: If the recording has no 'Time' column
        """
        path = self.get_file_path(session_id)
        if path.suffix == '.parquet':
            df = pl.read_parquet(path)
        else:
            # Extended schema inference so float columns aren't read as integers
            df = pl.read_csv(path, infer_schema_length=10000)
        
        if TIME_COLUMN not in df.columns:
            raise ValueError(f"Recording {path.name} has no '{TIME_COLUMN}' column")
        
        logger.info("recording_loaded", session=session_id, rows=len(df), columns=df.columns)
        return df.sort(TIME_COLUMN)
    
    def time_to_sample_index(self, df: pl.DataFrame, start_time: float) -> int:
        """
        Convert time in seconds to sample index.
        
        Args:
            df: DataFrame with 'Time' column sorted ascending
            start_time: Time in seconds
            
        Returns:
            Index of the first sample at or after start_time (len(df) if none)
        """
        return int(df[TIME_COLUMN].search_sorted(start_time, side='left'))
    
    def validate_start_position(self, df: pl.DataFrame, start_index: int) -> Tuple[bool, Optional[str]]:
        """
        Validate that start position is within data bounds.
        
        Returns:
            Tuple of (is_valid, error_message)
        """
        if start_index >= len(df):
            if len(df) == 0:
                return False, "Recording is empty"
            max_time = df[TIME_COLUMN][-1]
            return False, f"Start time is beyond available data (max time: {max_time:.2f}s)"
        return True, None


class RecordedPlatform(Platform):
    """
    Replays a recorded session as if it were a live device.
    
    Playback starts with the first subscription and runs at the recorded
    rate multiplied by ``speed``; a speed of 0 or less replays as fast as
    the event loop allows. Capabilities follow the columns present in the
    recording. No explicit permission is needed. Location fixes are sent
    when the position changes and repeated while it stays the same, as a
    device watch keeps reporting a stationary fix.
    """
    
    def __init__(
        self,
        df: pl.DataFrame,
        speed: float = 1.0,
        start_index: int = 0,
        clock: Callable[[], int] = wall_clock_ms,
    ):
        self.df = df
        self.speed = speed
        self.start_index = start_index
        self.clock = clock
        self.samples_played = 0
        self._motion_listeners: List[RawListener] = []
        self._orientation_listeners: List[RawListener] = []
        self._position_listeners: List[RawListener] = []
        self._task: Optional[asyncio.Task] = None
        self._position_refresh_s = POSITION_REFRESH_S
    
    def probe(self) -> Capabilities:
        columns = set(self.df.columns)
        has_rows = len(self.df) > self.start_index
        return Capabilities(
            motion_available=has_rows and all(c in columns for c in ACCEL_COLUMNS),
            orientation_available=has_rows and HEADING_COLUMN in columns,
            permission_required=False,
            geolocation_available=has_rows and all(c in columns for c in LOCATION_COLUMNS),
        )
    
    @property
    def playing(self) -> bool:
        return self._task is not None and not self._task.done()
    
    @property
    def finished(self) -> bool:
        return self._task is not None and self._task.done()
    
    def subscribe_motion(self, listener: RawListener) -> Unsubscribe:
        if not self.probe().motion_available:
            raise CapabilityUnavailable("Recording has no accelerometer columns")
        return self._subscribe(self._motion_listeners, listener)
    
    def subscribe_orientation(self, listener: RawListener) -> Unsubscribe:
        if not self.probe().orientation_available:
            raise CapabilityUnavailable("Recording has no heading column")
        return self._subscribe(self._orientation_listeners, listener)
    
    def watch_position(self, on_fix: RawListener, on_error, options: PositionWatchOptions) -> Unsubscribe:
        if not self.probe().geolocation_available:
            raise CapabilityUnavailable("Recording has no location columns")
        # An unchanged location is re-sent well inside the watcher's timeout
        self._position_refresh_s = min(POSITION_REFRESH_S, options.timeout_ms / 2000.0)
        return self._subscribe(self._position_listeners, on_fix)
    
    def _subscribe(self, listeners: List[RawListener], listener: RawListener) -> Unsubscribe:
        listeners.append(listener)
        self._ensure_playback()
        
        def unsubscribe() -> None:
            if listener in listeners:
                listeners.remove(listener)
            if not self._has_listeners():
                self.stop()
        
        return unsubscribe
    
    def _has_listeners(self) -> bool:
        return bool(self._motion_listeners or self._orientation_listeners or self._position_listeners)
    
    def _ensure_playback(self) -> None:
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._play())
    
    def stop(self) -> None:
        """Stop playback."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
    
    async def _play(self) -> None:
        loop = asyncio.get_running_loop()
        columns = set(self.df.columns)
        has_heading = HEADING_COLUMN in columns
        has_location = all(c in columns for c in LOCATION_COLUMNS)
        
        base_ms = self.clock()
        started = loop.time()
        first_time = None
        last_location = None
        last_sent = None

        for row in self.df[self.start_index:].iter_rows(named=True):
            t = row[TIME_COLUMN]
            if first_time is None:
                first_time = t
            offset = t - first_time
            
            if self.speed > 0:
                delay = offset / self.speed - (loop.time() - started)
                await asyncio.sleep(max(0.0, delay))
            else:
                # Give control back to event loop between samples
                await asyncio.sleep(0)
            
            timestamp_ms = base_ms + int(round(offset * 1000))
            self._dispatch(self._motion_listeners, {
                'x': row.get(ACCEL_COLUMNS[0]),
                'y': row.get(ACCEL_COLUMNS[1]),
                'z': row.get(ACCEL_COLUMNS[2]),
                'timestamp_ms': timestamp_ms,
            })
            if has_heading:
                self._dispatch(self._orientation_listeners, {
                    'heading_degrees': row[HEADING_COLUMN],
                    'timestamp_ms': timestamp_ms,
                })
            if has_location:
                location = (row[LOCATION_COLUMNS[0]], row[LOCATION_COLUMNS[1]])
                stale = last_sent is None or loop.time() - last_sent >= self._position_refresh_s
                if None not in location and (location != last_location or stale):
                    last_location = location
                    last_sent = loop.time()
                    self._dispatch(self._position_listeners, {
                        'latitude': location[0],
                        'longitude': location[1],
                    })
            self.samples_played += 1
        
        logger.info("playback_finished", samples=self.samples_played)
    
    def _dispatch(self, listeners: List[RawListener], payload: dict) -> None:
        for listener in list(listeners):
            listener(payload)
