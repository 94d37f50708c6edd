import argparse
import logging
import os
from datetime import datetime

from projection.engine import project_portal
from projection.loaders import load_job_rows, load_log_rows, load_progress_rows, load_property_rows


def run_projection(data_dir="sampledata", now=None):
    print("=== RENDERING PASS ===")

    # 1. Load Data
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    data_dir = os.path.join(base_dir, data_dir)

    property_rows = load_property_rows(os.path.join(data_dir, "client_list.csv"))
    job_rows = load_job_rows(os.path.join(data_dir, "jobs.csv"))
    log_rows = load_log_rows(os.path.join(data_dir, "logs.csv"))

    progress_path = os.path.join(data_dir, "job_progress.csv")
    progress_rows = load_progress_rows(progress_path) if os.path.exists(progress_path) else []

    print(f"Loaded {len(property_rows)} properties, {len(job_rows)} jobs, {len(log_rows)} logs.\n")

    # 2. Project everything against one clock value
    now = now or datetime.now().astimezone()
    result = project_portal(property_rows, job_rows, log_rows, now=now, progress_rows=progress_rows)

    # 3. Report
    for view in result.accounts:
        print(f"--- {view.account.name} [{view.account.account_id}] ---")
        for prop in view.properties:
            print(f"  {prop.record.address or prop.record.property_id}: {prop.bins_summary or 'no bins this week'}")
        for job_view in view.jobs:
            job = job_view.resolved.job
            job_type = job.job_type.value if job.job_type else "job"
            print(f"    {job_type:<9} {job.day_of_week or '?':<10} {job_view.status.value:<10} {job_view.eta_label}")
        for entry in view.history[:3]:
            photo = "photo" if entry.proof_photos else "no photo"
            print(f"    done      {entry.completed_on.isoformat():<10} {entry.property_name} ({photo})")

    print("\n=== PASS COMPLETE ===")
    print(f"Accounts: {len(result.accounts)}")
    print(f"Orphan jobs: {len(result.orphan_jobs)}")
    print(f"Unmatched completed logs: {len(result.orphan_history)}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Print the portal projection for exported table snapshots.")
    parser.add_argument("--data-dir", default="sampledata")
    parser.add_argument("--now", help="ISO datetime to render at (defaults to the current time)")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    run_projection(args.data_dir, datetime.fromisoformat(args.now) if args.now else None)
