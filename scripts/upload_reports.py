# scripts/upload_reports.py
"""
Bulk-submit reports from a JSON file through the reporting engine, so every
record is classified, scored, linked and trend-checked exactly like a live
submission.

Usage:
  python scripts/upload_reports.py --file reports.json [--dry-run]

Each record:
  {"type": "damage", "category": "structural", "title": "...",
   "description": "...", "lat": 34.05, "lon": -118.24, "accuracy": 30,
   "reporter_id": "u-1", "tags": ["storm"]}

Env vars (same as the API):
  STORE_BACKEND=dynamo
  AWS_REGION=eu-north-1
  REPORTS_TABLE=Reports
"""
import os
import sys
import json
import time
import argparse

from crowdreport.dependencies import build_engine
from crowdreport.errors import ReportingError

REQUIRED = ("type", "category", "title", "description", "lat", "lon")


def to_submission(rec: dict) -> dict:
    return {
        "type": rec["type"].strip(),
        "category": rec["category"].strip(),
        "subcategory": rec.get("subcategory"),
        "title": rec["title"],
        "description": rec["description"],
        "location": {
            "coordinates": {"lat": float(rec["lat"]), "lon": float(rec["lon"])},
            "accuracy": float(rec.get("accuracy", 100)),
            "address": rec.get("address"),
            "city": rec.get("city"),
        },
        "reporter": {"id": rec.get("reporter_id"), "name": rec.get("reporter_name")},
        "tags": rec.get("tags") or [],
        "source": rec.get("source", "api"),
    }


def main():
    parser = argparse.ArgumentParser(description="Upload a JSON list of reports through the engine.")
    parser.add_argument("--file", "-f", default="reports.json",
                        help="Path to JSON file (list of report objects).")
    parser.add_argument("--dry-run", action="store_true",
                        help="Validate and print, but do not submit.")
    parser.add_argument("--sleep", type=float, default=0.0,
                        help="Optional delay (seconds) between submissions.")
    args = parser.parse_args()

    path = os.path.abspath(args.file)
    if not os.path.exists(path):
        print(f"Error: file not found: {path}")
        sys.exit(1)

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            print(f"JSON parse error: {e}")
            sys.exit(1)

    if not isinstance(data, list):
        print("Error: JSON root must be a list of report objects.")
        sys.exit(1)

    engine = None if args.dry_run else build_engine()

    total = len(data)
    ok = 0
    skipped = 0
    failed = 0
    for i, rec in enumerate(data, 1):
        missing = [k for k in REQUIRED if rec.get(k) in (None, "")]
        if missing:
            print(f"[{i}/{total}] SKIP (missing {', '.join(missing)}): {rec}")
            skipped += 1
            continue

        submission = to_submission(rec)
        if args.dry_run:
            print(f"[{i}/{total}] DRY-RUN submit_report(type='{submission['type']}', "
                  f"category='{submission['category']}', title='{submission['title']}')")
            ok += 1
            continue

        try:
            report = engine.submit_report(**submission)
        except ReportingError as e:
            print(f"[{i}/{total}] REJECTED {e} for record: {rec}")
            failed += 1
            continue

        ok += 1
        print(f"[{i}/{total}] {report.id} priority={report.priority} status={report.status}")
        if args.sleep > 0:
            time.sleep(args.sleep)

    print(f"\nDone. Success: {ok}  Skipped: {skipped}  Failed: {failed}  Total read: {total}")


if __name__ == "__main__":
    main()
