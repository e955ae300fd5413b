"""One-off migration script: JSON data file -> SQL key-value table."""
from __future__ import annotations

from pathlib import Path
import argparse
import sys

# Make the hentrack package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from hentrack.core.config import get_settings
from hentrack.db.create_tables import create_all
from hentrack.repositories.json_storage import JSONFileStore
from hentrack.repositories.sql_repository import SQLKeyValueStore
from hentrack.repositories.state import ALL_KEYS


def migrate(data_file: Path) -> list[str]:
    if not data_file.exists():
        raise SystemExit(f"Data file not found: {data_file}")
    source = JSONFileStore(data_file)
    target = SQLKeyValueStore()
    create_all()
    copied = []
    for key in ALL_KEYS:
        value = source.get(key)
        if value is None:
            continue
        target.set(key, value)
        copied.append(key)
    return copied


def main() -> None:
    ap = argparse.ArgumentParser(description="Copy HenTrack data from the JSON file into DATABASE_URL")
    ap.add_argument("--data-file", help="JSON data file (default: HENTRACK_DATA_FILE)")
    args = ap.parse_args()
    data_file = Path(args.data_file) if args.data_file else get_settings().data_file
    copied = migrate(data_file)
    print(f"Migrated {len(copied)} keys: {', '.join(copied) or '-'}")


if __name__ == "__main__":
    main()
