"""CSV export of per-frame agent positions."""

import csv
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..model.state import FrameSnapshot


class CSVWriter:
    """
    Exports animation frames to CSV format incrementally.

    Output format:
        frame,time_ms,progress,state,flight_x,flight_y,street_x,street_y,...
        0,0.0,0.0,running,3.0,3.0,3.0,3.0,...
        ...
    """

    FIELDNAMES = ['frame', 'time_ms', 'progress', 'state',
                  'flight_x', 'flight_y', 'street_x', 'street_y',
                  'flight_heading', 'street_heading']

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)
        self.file: Optional[object] = None
        self.writer: Optional[csv.DictWriter] = None
        self._is_open = False
        self.rows_written = 0

    def open(self) -> None:
        """Initialize file and write header."""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.file = open(self.output_path, 'w', newline='')
        self.writer = csv.DictWriter(self.file, fieldnames=self.FIELDNAMES)
        self.writer.writeheader()
        self._is_open = True

    def append(self, snapshot: "FrameSnapshot") -> None:
        """Write one frame."""
        if not self._is_open:
            self.open()
        self.writer.writerow(snapshot.to_csv_row())
        self.file.flush()
        self.rows_written += 1

    def close(self) -> None:
        """Close file handle."""
        if self.file:
            self.file.close()
            self.file = None
            self.writer = None
            self._is_open = False

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
