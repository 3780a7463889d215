from pathlib import Path

import pandas


FILENAME = "school_details.csv"


def build_header(records: list[dict[str, str]]) -> list[str]:
    # Only the first record decides the columns.
    first_keys = list(records[0])
    return ["school_name"] + [key for key in first_keys if key != "school_name"]


def save_records(records: list[dict[str, str]], export_path: Path) -> int:

    if not records:
        print("No schools were scraped")
        return 0

    export_path = Path(export_path)
    export_path.mkdir(parents=True, exist_ok=True)
    filepath = export_path / FILENAME

    df = pandas.DataFrame(records, columns=build_header(records))
    df.to_csv(filepath, index=False)

    print(f"Saved {len(records)} schools to {filepath}")

    return len(records)
