import os
import argparse
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

DEPARTMENTS = ["Research & Development", "Sales", "Human Resources"]
JOB_ROLES = {
    "Research & Development": ["Research Scientist", "Laboratory Technician", "Manager"],
    "Sales": ["Sales Executive", "Sales Representative", "Manager"],
    "Human Resources": ["Human Resources", "Manager"],
}
COLUMNS = ["EmployeeNumber", "Age", "Attrition", "Department", "JobRole", "MonthlyIncome"]


def generate_hr_records(num_records: int = 100, seed: Optional[int] = None) -> List[Dict[str, str]]:
    """
    Generate synthetic employee records shaped like the HR_1 dataset.

    Employee numbers are unique and start at 1, so they never collide with
    the row inserted by the create operation.
    """
    rng = np.random.default_rng(seed)
    records = []
    for number in range(1, num_records + 1):
        department = str(rng.choice(DEPARTMENTS))
        records.append({
            "EmployeeNumber": str(number),
            "Age": str(int(rng.integers(18, 61))),
            "Attrition": str(rng.choice(["Yes", "No"], p=[0.16, 0.84])),
            "Department": department,
            "JobRole": str(rng.choice(JOB_ROLES[department])),
            "MonthlyIncome": str(int(rng.integers(1000, 20000))),
        })
    return records


def write_sample_csv(output_file: str, num_records: int = 100, seed: Optional[int] = None) -> str:
    """Write generated records to ``output_file`` and return its path."""
    directory = os.path.dirname(output_file)
    if directory:
        os.makedirs(directory, exist_ok=True)
    df = pd.DataFrame(generate_hr_records(num_records, seed), columns=COLUMNS)
    df.to_csv(output_file, index=False)
    return output_file


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description='Generate a sample HR CSV file')
    parser.add_argument('--output', type=str, default=os.path.join("data", "sample", "HR_1.csv"),
                        help='Path of the CSV file to write')
    parser.add_argument('--records', type=int, default=100, help='Number of records to generate')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    args = parser.parse_args(argv)

    output_file = write_sample_csv(args.output, args.records, args.seed)
    print(f"Generated CSV file at: {output_file}")


if __name__ == "__main__":
    main()
