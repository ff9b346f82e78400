"""
WiFiAnalytics - File Exporter

Writes generated tables, transformed views and rendered SQL to local files.
Used by dry runs and --export.
"""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from wifi_analytics.models.facts import RawTelemetryRecord


logger = logging.getLogger(__name__)


class FileExporter:
    """
    Exports rows to CSV / JSON-lines files under one directory.

    Usage:
        exporter = FileExporter(Path("data/exports"))
        exporter.write_csv("dim_networks", [n.to_dict() for n in networks])
    """

    SUPPORTED_FORMATS = ("csv", "jsonl")

    def __init__(self, export_dir: Path, export_format: str = "csv"):
        """
        Initialize the exporter.

        Args:
            export_dir: Target directory (created if missing)
            export_format: Default tabular format, "csv" or "jsonl"

        Raises:
            ValueError: If the format is not supported
        """
        if export_format not in self.SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported export format {export_format!r}; "
                f"expected one of {self.SUPPORTED_FORMATS}"
            )
        self.export_dir = Path(export_dir)
        self.export_format = export_format
        self.export_dir.mkdir(parents=True, exist_ok=True)
        self.written: List[Path] = []

    def _path(self, name: str, suffix: str) -> Path:
        path = self.export_dir / f"{name}.{suffix}"
        self.written.append(path)
        return path

    def write_rows(self, name: str, rows: Iterable[Dict[str, Any]], columns: Optional[List[str]] = None) -> int:
        """Write rows in the default format."""
        if self.export_format == "jsonl":
            return self.write_jsonl(name, rows)
        return self.write_csv(name, rows, columns)

    def write_csv(self, name: str, rows: Iterable[Dict[str, Any]], columns: Optional[List[str]] = None) -> int:
        """
        Write dictionaries to <name>.csv.

        Args:
            name: File stem
            rows: Row dictionaries (consumed once)
            columns: Column order; taken from the first row when None

        Returns:
            Number of rows written
        """
        path = self._path(name, "csv")
        iterator = iter(rows)
        first = next(iterator, None)

        count = 0
        with open(path, "w", newline="", encoding="utf-8") as handle:
            if first is None:
                if columns:
                    csv.DictWriter(handle, fieldnames=columns).writeheader()
                logger.info(f"[OK] Wrote 0 rows to {path}")
                return 0

            writer = csv.DictWriter(handle, fieldnames=columns or list(first.keys()), extrasaction="ignore")
            writer.writeheader()
            writer.writerow(first)
            count = 1
            for row in iterator:
                writer.writerow(row)
                count += 1

        logger.info(f"[OK] Wrote {count} rows to {path}")
        return count

    def write_jsonl(self, name: str, rows: Iterable[Dict[str, Any]]) -> int:
        """Write one JSON document per line to <name>.jsonl."""
        path = self._path(name, "jsonl")
        count = 0
        with open(path, "w", encoding="utf-8") as handle:
            for row in rows:
                handle.write(json.dumps(row, default=str))
                handle.write("\n")
                count += 1
        logger.info(f"[OK] Wrote {count} rows to {path}")
        return count

    def write_raw_telemetry(self, records: List[RawTelemetryRecord]) -> int:
        """Raw telemetry is always JSON-lines, one staging row per line."""
        return self.write_jsonl("raw_network_telemetry", (record.to_dict() for record in records))

    def write_sql(self, name: str, statements: Iterable[str]) -> int:
        """Write statements to <name>.sql, each terminated by ';'."""
        path = self._path(name, "sql")
        count = 0
        with open(path, "w", encoding="utf-8") as handle:
            for statement in statements:
                handle.write(statement.strip().rstrip(";"))
                handle.write(";\n\n")
                count += 1
        logger.info(f"[OK] Wrote {count} statements to {path}")
        return count

    def write_json(self, name: str, document: Dict[str, Any]) -> Path:
        """Write a single JSON document to <name>.json."""
        path = self._path(name, "json")
        with open(path, "w", encoding="utf-8") as handle:
            json.dump(document, handle, indent=2, default=str)
        logger.info(f"[OK] Wrote {path}")
        return path
