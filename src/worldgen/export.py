"""Parquet export of expansion runs for offline analysis."""

import json
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq
import structlog

from .settlements.expansion import ExpansionResult
from .settlements.models import Route, Settlement

logger = structlog.get_logger()


SETTLEMENT_SCHEMA = pa.schema([
    ("run_id", pa.string()),
    ("settlement_id", pa.string()),
    ("name", pa.string()),
    ("kind", pa.string()),
    ("site", pa.string()),
    ("x", pa.int64()),
    ("y", pa.int64()),
    ("population", pa.int32()),
    ("specializations_json", pa.string()),  # JSON list of specialization names
    ("structure_count", pa.int32()),
])

ROUTE_SCHEMA = pa.schema([
    ("run_id", pa.string()),
    ("from_settlement_id", pa.string()),
    ("to_settlement_id", pa.string()),
    ("kind", pa.string()),
    ("distance", pa.int32()),
    ("complete", pa.bool_()),
    ("path_json", pa.string()),  # JSON list of [x, y] pairs
])


class ExpansionLogWriter:
    """Writes expansion results to Parquet files.

    Accumulates runs in memory and writes ``settlements.parquet`` and
    ``routes.parquet`` on flush or close, appending to files written earlier
    by the same writer.
    """

    def __init__(self, run_dir: Path):
        """Initialize ExpansionLogWriter.

        Args:
            run_dir: Directory to write Parquet files to
        """
        self.run_dir = Path(run_dir)
        self._settlement_data: list[dict] = []
        self._route_data: list[dict] = []
        self._files_exist = False

    def log_expansion(self, run_id: str, result: ExpansionResult) -> None:
        """Buffer one expansion run."""
        for settlement in result.settlements:
            self._settlement_data.append(self._settlement_row(run_id, settlement))
        for route in result.routes:
            self._route_data.append(self._route_row(run_id, route))

    def flush(self) -> None:
        """Write buffered data to Parquet files."""
        if not self._settlement_data and not self._route_data:
            return

        self.run_dir.mkdir(parents=True, exist_ok=True)
        self._write_parquet("settlements.parquet", SETTLEMENT_SCHEMA, self._settlement_data)
        self._write_parquet("routes.parquet", ROUTE_SCHEMA, self._route_data)

        self._settlement_data.clear()
        self._route_data.clear()
        self._files_exist = True
        logger.debug("expansion_log_flushed", run_dir=str(self.run_dir))

    def close(self) -> None:
        """Flush remaining data and finalize files."""
        self.flush()
        logger.info("expansion_log_closed", run_dir=str(self.run_dir))

    def _write_parquet(self, filename: str, schema: pa.Schema, data: list[dict]) -> None:
        """Write data to a Parquet file, appending if it exists."""
        if not data:
            return

        filepath = self.run_dir / filename
        table = pa.Table.from_pylist(data, schema=schema)

        if self._files_exist and filepath.exists():
            existing = pq.read_table(filepath)
            table = pa.concat_tables([existing, table])

        pq.write_table(table, filepath)

    def _settlement_row(self, run_id: str, settlement: Settlement) -> dict:
        return {
            "run_id": run_id,
            "settlement_id": settlement.id,
            "name": settlement.name,
            "kind": settlement.kind.value,
            "site": settlement.site.value,
            "x": settlement.x,
            "y": settlement.y,
            "population": settlement.population.total,
            "specializations_json": json.dumps([s.value for s in settlement.specializations]),
            "structure_count": len(settlement.structures),
        }

    def _route_row(self, run_id: str, route: Route) -> dict:
        return {
            "run_id": run_id,
            "from_settlement_id": route.from_settlement_id,
            "to_settlement_id": route.to_settlement_id,
            "kind": route.kind.value,
            "distance": route.distance,
            "complete": route.complete,
            "path_json": json.dumps([[p.x, p.y] for p in route.path]),
        }
