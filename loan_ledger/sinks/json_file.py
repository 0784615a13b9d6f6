"""JSON file sink for exporting loan book collections and dashboards."""

import json
import logging
from pathlib import Path
from typing import Any

from loan_ledger.exceptions import SinkError
from loan_ledger.sinks.serialization import to_dict

logger = logging.getLogger(__name__)


class JsonFileSink:
    """Output records to JSON files, one file per entity type."""

    def __init__(self, output_dir: str | Path, pretty: bool = False) -> None:
        """Initialize JSON file sink.

        Parameters
        ----------
        output_dir : str | Path
            Directory to write JSON files.
        pretty : bool
            Pretty-print JSON output.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.pretty = pretty
        self._counts: dict[str, int] = {}

    def write_batch(self, entity_type: str, records: list[Any]) -> Path:
        """Write a batch of records to ``<entity_type>.json``."""
        data = [to_dict(record) for record in records]
        path = self._dump(entity_type, data)
        self._counts[entity_type] = len(records)
        return path

    def write_record(self, name: str, record: Any) -> Path:
        """Write a single document (e.g. a dashboard) to ``<name>.json``."""
        path = self._dump(name, to_dict(record))
        self._counts[name] = 1
        return path

    def read_batch(self, entity_type: str) -> list[dict]:
        """Read back a batch written by :meth:`write_batch`.

        A missing file reads as an empty batch.
        """
        file_path = self.output_dir / f"{entity_type}.json"
        if not file_path.exists():
            return []
        try:
            with open(file_path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise SinkError(f"Failed to read {file_path}: {exc}") from exc

    def close(self) -> None:
        """Log a summary of what was written."""
        logger.info("JSON files written to: %s", self.output_dir)
        for entity_type, count in self._counts.items():
            logger.info("  %s: %d records", entity_type, count)

    def _dump(self, name: str, data: Any) -> Path:
        file_path = self.output_dir / f"{name}.json"
        try:
            with open(file_path, "w", encoding="utf-8") as f:
                if self.pretty:
                    json.dump(data, f, indent=2, ensure_ascii=False, default=str)
                else:
                    json.dump(data, f, ensure_ascii=False, default=str)
        except OSError as exc:
            raise SinkError(f"Failed to write {file_path}: {exc}") from exc
        return file_path
