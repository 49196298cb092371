"""Load the official student roster from a CSV file.

Usage:
    python -m backend.import_roster roster.csv

The file needs a header row with the columns ``prn,name,course,year``.
PRNs already on the roster are left untouched.
"""
import csv
import sys

from sqlalchemy.orm import Session

from backend.database import Base, SessionLocal, engine
from backend.models.student import Student, is_valid_prn

REQUIRED_COLUMNS = ('prn', 'name', 'course', 'year')


def parse_roster_rows(rows) -> tuple[list[Student], list[str]]:
    students: list[Student] = []
    errors: list[str] = []
    seen: set[str] = set()

    for line_number, row in enumerate(rows, start=2):
        prn = (row.get('prn') or '').strip()
        name = (row.get('name') or '').strip()
        course = (row.get('course') or '').strip()
        year = (row.get('year') or '').strip()

        if not is_valid_prn(prn):
            errors.append(f'line {line_number}: PRN must be exactly 12 digits')
            continue
        if not name or not course:
            errors.append(f'line {line_number}: name and course are required')
            continue
        if not year.isdigit():
            errors.append(f'line {line_number}: year must be a whole number')
            continue
        if prn in seen:
            errors.append(f'line {line_number}: duplicate PRN {prn}')
            continue

        seen.add(prn)
        students.append(Student(prn=prn, name=name, course=course, year=int(year)))

    return students, errors


def import_roster(students: list[Student], db: Session) -> int:
    if not students:
        return 0

    existing = {
        prn for (prn,) in db.query(Student.prn).filter(Student.prn.in_([s.prn for s in students])).all()
    }
    new_students = [s for s in students if s.prn not in existing]
    db.add_all(new_students)
    db.commit()
    return len(new_students)


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print('Usage: python -m backend.import_roster <roster.csv>', file=sys.stderr)
        sys.exit(2)

    with open(args[0], newline='', encoding='utf-8') as roster_file:
        reader = csv.DictReader(roster_file)
        missing = [column for column in REQUIRED_COLUMNS if column not in (reader.fieldnames or [])]
        if missing:
            print(f'Roster is missing columns: {", ".join(missing)}', file=sys.stderr)
            sys.exit(2)
        students, errors = parse_roster_rows(reader)

    Base.metadata.create_all(bind=engine, tables=[Student.__table__])
    db = SessionLocal()
    try:
        inserted = import_roster(students, db)
    finally:
        db.close()

    print(f'Imported {inserted} students, skipped {len(students) - inserted} already on the roster.')
    for error in errors:
        print(error, file=sys.stderr)
    if errors:
        sys.exit(1)


if __name__ == '__main__':
    main()
