#!/usr/bin/env python3
"""
Run the spreadsheet importer on a local file, as the given user.

Usage:
    python scripts/import_file.py influencers.xlsx --user ops@example.com
    python scripts/import_file.py list.csv --user user_2abc... --mapping '{"name": "채널 이름"}'
"""
import asyncio
import argparse
import json
import logging
import sys
from pathlib import Path

# Add parent directory to path so we can import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.database import AsyncSessionLocal
from app.exceptions import ImportFileError
from app.services.import_service import run_import
from app.services.importer import SQLAlchemyImportStore
from app.services.user_service import find_user

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def import_file(path: Path, identifier: str, mapping_json: str = None, show_errors: int = 20) -> int:
    if not path.is_file():
        logger.error(f"File not found: {path}")
        return 1

    async with AsyncSessionLocal() as db:
        user = await find_user(db, identifier)
        if not user:
            logger.error(f"No user matches '{identifier}'")
            return 1

        try:
            report = await run_import(
                SQLAlchemyImportStore(db),
                path.read_bytes(),
                path.name,
                uploaded_by=user.id,
                mapping_json=mapping_json,
            )
        except ImportFileError as e:
            logger.error(f"Import rejected: {e.message}")
            return 1

    print(f"Batch:   {report.batch_id}")
    print(f"Total:   {report.total}")
    print(f"Success: {report.success}")
    print(f"Errors:  {report.errors}")

    for error in report.error_rows[:show_errors]:
        print(f"  row {error.row_index}: {error.message}")
        print(f"    {json.dumps(error.raw_data, ensure_ascii=False)}")

    if report.errors > show_errors:
        print(f"  ... {report.errors - show_errors} more stored on the batch")

    return 0


def main():
    parser = argparse.ArgumentParser(description='Import influencers from a CSV/XLSX file')
    parser.add_argument('path', type=Path, help='CSV, XLSX or XLS file')
    parser.add_argument('--user', required=True, help='Importing user: Clerk user ID, email or username')
    parser.add_argument('--mapping', default=None, help='JSON object: canonical field -> column header')
    parser.add_argument('--show-errors', type=int, default=20, help='Row errors to print')
    args = parser.parse_args()

    sys.exit(asyncio.run(import_file(args.path, args.user, args.mapping, args.show_errors)))


if __name__ == "__main__":
    main()
