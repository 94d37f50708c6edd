import os
import uuid
from datetime import datetime, timedelta

import numpy as np
import pandas as pd

FIRST_NAMES = ["Alex", "Sam", "Jordan", "Priya", "Mei", "Tom", "Aisha", "Luca", "Nina", "Omar"]
SURNAMES = ["Nguyen", "Smith", "Patel", "Rossi", "Kim", "Brown", "Haddad", "Walker"]
COMPANIES = ["Harbour Strata", "Greenway Rentals", "Baker St Body Corp", "Northside Realty"]
STREETS = ["Oak St", "Beach Rd", "Hill Ave", "Station St", "Park Pde", "Church Ln", "Bay Rd"]
SUBURBS = ["Fairlight, Sydney", "Manly, Sydney", "Balgowlah, Sydney", "Seaforth, Sydney"]
WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


def _bin_columns(prefix):
    """
    One colour's freq/flip/bins, with the kind of mess staff entry produces.
    """
    frequency = np.random.choice(["Weekly", "Fortnightly", "", " fortnightly "], p=[0.45, 0.35, 0.15, 0.05])
    flip = ""
    if frequency.strip().lower() == "fortnightly":
        flip = np.random.choice(["Yes", ""], p=[0.5, 0.5])
    bins = np.random.choice(["1", "2", "", "two"], p=[0.7, 0.15, 0.1, 0.05]) if frequency else ""
    return {f"{prefix}_freq": frequency, f"{prefix}_flip": flip, f"{prefix}_bins": bins}


def generate_mock_properties(num_clients=60, output_dir="sampledata"):
    """
    Generates client_list, jobs and logs CSVs shaped like the portal tables.
    Several clients own more than one property, some under a company, some
    with name/company filled in inconsistently, so account grouping has real work to do.
    """
    os.makedirs(output_dir, exist_ok=True)

    properties = []
    jobs = []
    logs = []
    today = datetime.now().date()

    for client_index in range(num_clients):
        # 1. Owner identity (sometimes only a company, sometimes neither)
        client_name = f"{np.random.choice(FIRST_NAMES)} {np.random.choice(SURNAMES)}"
        company = np.random.choice(COMPANIES) if np.random.random() < 0.25 else ""
        if np.random.random() < 0.1:
            client_name = ""

        num_properties = np.random.choice([1, 2, 3], p=[0.7, 0.2, 0.1])
        for _ in range(num_properties):
            property_id = f"p_{str(uuid.uuid4())[:8]}"
            address = f"{np.random.randint(1, 200)} {np.random.choice(STREETS)}, {np.random.choice(SUBURBS)}"
            collection_day = np.random.choice(WEEKDAYS)
            put_out_day = WEEKDAYS[(WEEKDAYS.index(collection_day) - 1) % len(WEEKDAYS)]

            row = {
                "property_id": property_id,
                "account_id": "",
                "client_name": client_name,
                "company": company,
                "address": address,
                "put_bins_out": put_out_day,
                "collection_day": collection_day,
                "notes": "",
            }
            for prefix in ("red", "yellow", "green"):
                row.update(_bin_columns(prefix))
            properties.append(row)

            # 2. One put-out and one bring-in job per property
            for job_type, day in (("put_out", put_out_day), ("bring_in", collection_day)):
                job_id = f"j_{str(uuid.uuid4())[:8]}"
                jobs.append({
                    "id": job_id,
                    # ~5% of jobs were created before property ids were linked
                    "property_id": property_id if np.random.random() > 0.05 else "",
                    "address": address,
                    "day_of_week": day,
                    "job_type": job_type,
                    "last_completed_on": "",
                })

                # 3. Some of them already have a completion log this week
                if np.random.random() < 0.3:
                    done_on = today - timedelta(days=int(np.random.randint(0, 3)))
                    logs.append({
                        "id": f"l_{str(uuid.uuid4())[:8]}",
                        "job_id": job_id if np.random.random() > 0.1 else "",
                        "address": address,
                        "done_on": done_on.isoformat(),
                        "photo_path": f"proofs/{job_id}.jpg" if np.random.random() < 0.8 else "",
                        "gps_lat": np.round(-33.79 + np.random.uniform(-0.02, 0.02), 6),
                        "gps_lng": np.round(151.27 + np.random.uniform(-0.02, 0.02), 6),
                        "notes": "",
                    })

    # 4. Save to CSV
    pd.DataFrame(properties).to_csv(os.path.join(output_dir, "client_list.csv"), index=False)
    pd.DataFrame(jobs).to_csv(os.path.join(output_dir, "jobs.csv"), index=False)
    pd.DataFrame(logs).to_csv(os.path.join(output_dir, "logs.csv"), index=False)

    print(f"Generated {len(properties)} properties, {len(jobs)} jobs and {len(logs)} logs in '{output_dir}'")

    # Quick preview of how many properties share an owner name
    counts = pd.DataFrame(properties)["client_name"].replace("", np.nan).dropna().value_counts().head(5)
    print("\nTop 5 client names (multi-property accounts):")
    for name, count in counts.items():
        print(f"  {name}: {count} properties")


if __name__ == "__main__":
    generate_mock_properties(num_clients=60)
