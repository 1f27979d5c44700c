"""CLI script to bulk-import students from a local JSON or CSV file.
Usage: python scripts/import_students.py PATH [--dry-run]
"""
import sys
import argparse
import pathlib
# Ensure `backend/` is on sys.path so `student_management` imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from student_management.database import engine, create_db_and_tables
from student_management import services


def main(path: pathlib.Path, dry_run: bool = False) -> int:
    """Import `path` and print a summary.

    Returns a process exit code: 0 when every row was created or
    skipped as a duplicate, 1 when the file or any row was rejected.
    """
    if not path.exists():
        print(f'File not found: {path}')
        return 1
    create_db_and_tables()
    with Session(engine) as session:
        svc = services.StudentImportService(session)
        try:
            result = svc.import_file(path.read_bytes(), path.name, dry_run=dry_run)
        except ValueError as e:
            print(f'Error importing {path}: {e}')
            return 1
    for err in result['errors']:
        print(f"Row {err['index']}: {err['error']}")
    verb = 'would create' if dry_run else 'created'
    print(f"{path.name}: {verb} {result['created']}, skipped {result['skipped']}, errors {len(result['errors'])}")
    return 1 if result['errors'] else 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('path', type=pathlib.Path, help='JSON list or CSV file of students')
    parser.add_argument('--dry-run', action='store_true', help='Validate rows without writing to the database')
    args = parser.parse_args()
    sys.exit(main(args.path, dry_run=args.dry_run))
