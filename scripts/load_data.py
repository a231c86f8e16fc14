#!/usr/bin/env python
"""Script to seed brands, models, versions and config into Supabase."""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.services.db import get_supabase_client
from app.services.reference_loader import load_reference_data


def main():
    csv_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).parent.parent / "datafiles"

    if not csv_dir.is_dir():
        print(f"Error: data directory not found at {csv_dir}")
        sys.exit(1)

    print(f"Loading reference data from {csv_dir}...")
    counts = load_reference_data(get_supabase_client(), csv_dir)
    for table, count in counts.items():
        print(f"  {table}: {count} rows")
    print("Done")


if __name__ == "__main__":
    main()
