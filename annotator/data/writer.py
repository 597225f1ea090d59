"""Output writer for exported word rows."""

import json
from pathlib import Path
from typing import Iterable, List, Literal, Optional, Union

import pandas as pd


class RowWriter:
    """
    Buffers exported rows and writes them as CSV or JSON.

    Can be used as a context manager; the buffer is flushed on exit.
    """

    def __init__(
        self,
        output_path: Union[str, Path],
        format: Literal["csv", "json"] = "csv",
        encoding: str = "utf-8",
        columns: Optional[List[str]] = None,
    ):
        """
        Initialize the row writer.

        Args:
            output_path: Path to write output file.
            format: Output format (csv or json).
            encoding: Text encoding of the output file.
            columns: Column order for CSV output.
        """
        self.output_path = Path(output_path)
        self.format = format
        self.encoding = encoding
        self.columns = columns
        self._buffer: List[dict] = []

        # Ensure output directory exists
        self.output_path.parent.mkdir(parents=True, exist_ok=True)

    def write_rows(self, rows: Iterable[dict]) -> None:
        """Add rows to the buffer."""
        self._buffer.extend(rows)

    def flush(self) -> None:
        """Write buffered rows to file."""
        if self.format == "csv":
            df = pd.DataFrame(self._buffer, columns=self.columns)
            df.to_csv(self.output_path, index=False, encoding=self.encoding)
        elif self.format == "json":
            with open(self.output_path, "w", encoding=self.encoding) as f:
                json.dump(self._buffer, f, ensure_ascii=False, indent=2)
        else:
            raise ValueError(f"Unsupported output format: {self.format}")

    def __enter__(self) -> "RowWriter":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - flush unless an exception is propagating."""
        if exc_type is None:
            self.flush()

    @property
    def count(self) -> int:
        """Return the number of rows in the buffer."""
        return len(self._buffer)
