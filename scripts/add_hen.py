#!/usr/bin/env python3
"""
Register a bird directly in the configured store (HENTRACK_STORAGE).

Usage:
  python scripts/add_hen.py --name Daisy --breed Orpington [--gender Rooster] [--born 2024-03-01] [--weight 2.4]
"""
from __future__ import annotations

from pathlib import Path
import argparse
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from hentrack.core.config import get_settings
from hentrack.core.logging_config import configure_logging
from hentrack.repositories.state import build_key_value_store
from hentrack.services.errors import InvalidFormError
from hentrack.services.flock_store import FlockStore
from hentrack.services.forms import hen_from_form


def main() -> None:
    ap = argparse.ArgumentParser(description="Add a hen or rooster")
    ap.add_argument("--name", required=True)
    ap.add_argument("--breed", required=True)
    ap.add_argument("--gender", default="Hen", help="Hen or Rooster")
    ap.add_argument("--born", help="Birth date, ISO-8601 (default: today)")
    ap.add_argument("--feather-color", default="")
    ap.add_argument("--weight", help="Weight in kg")
    ap.add_argument("--mother", help="Id of the mother hen")
    ap.add_argument("--father", help="Id of the father rooster")
    args = ap.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level)
    # write-through: the process exits right after
    store = FlockStore(build_key_value_store(settings), debounce_seconds=0)
    payload = {
        "name": args.name,
        "breed": args.breed,
        "gender": args.gender,
        "birth_date": args.born,
        "feather_color": args.feather_color,
        "weight": args.weight,
        "parent_hen_id": args.mother,
        "parent_rooster_id": args.father,
    }
    try:
        hen = hen_from_form(payload, store.now())
    except InvalidFormError as exc:
        raise SystemExit(exc.message)
    if hen.parent_hen_id and not store.get_hen(hen.parent_hen_id):
        print(f"Warning: mother {hen.parent_hen_id} is not in the flock")
    if hen.parent_rooster_id and not store.get_hen(hen.parent_rooster_id):
        print(f"Warning: father {hen.parent_rooster_id} is not in the flock")
    store.add_hen(hen)
    store.close()
    print("OK: bird registered")
    print(f"  Id: {hen.id}")
    print(f"  Name: {hen.name} ({hen.gender.value}, {hen.breed})")


if __name__ == "__main__":
    main()
