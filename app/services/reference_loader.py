"""Seed the reference-data tables from CSV exports."""

from pathlib import Path
from typing import Any

import pandas as pd

from supabase import Client

from app.core.logging import logger
from app.models.vehicle import Brand, ConfigEntry, VehicleModel, Version

# Parents before children so foreign keys resolve
TABLE_ORDER = ("brands", "models", "versions", "config")

_ROW_MODELS = {
    "brands": Brand,
    "models": VehicleModel,
    "versions": Version,
    "config": ConfigEntry,
}

_CONFLICT_COLUMNS = {
    "brands": "id",
    "models": "id",
    "versions": "id",
    "config": "key",
}


def read_table_csv(csv_path: Path) -> list[dict[str, Any]]:
    """Read one CSV into records, with empty cells as ``None``."""
    df = pd.read_csv(csv_path)
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient="records")  # type: ignore[return-value]


def load_reference_data(client: Client, csv_dir: Path, batch_size: int = 500) -> dict[str, int]:
    """Upsert every ``<table>.csv`` found in ``csv_dir``.

    Returns:
        Rows written per table.
    """
    counts: dict[str, int] = {}
    for table in TABLE_ORDER:
        csv_path = csv_dir / f"{table}.csv"
        if not csv_path.exists():
            logger.warning(f"Skipping {table}: {csv_path} not found")
            continue

        # Every row is validated before the first write
        row_model = _ROW_MODELS[table]
        records = [row_model(**row).model_dump() for row in read_table_csv(csv_path)]
        written = 0
        for i in range(0, len(records), batch_size):
            batch = records[i : i + batch_size]
            client.table(table).upsert(batch, on_conflict=_CONFLICT_COLUMNS[table]).execute()
            written += len(batch)
            logger.info(f"Upserted {written}/{len(records)} rows into {table}")
        counts[table] = written
    return counts
