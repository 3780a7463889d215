import json
from pathlib import Path


def load_roster(filepath: Path) -> dict[str, str]:
    """Reads a JSON object of school name -> page url, keeping file order."""

    with open(filepath, "r", encoding="utf-8") as f:
        roster = json.load(f)

    if not isinstance(roster, dict):
        raise ValueError(f"{filepath} must contain a JSON object of name -> url")

    return roster


def iterate_roster(roster: dict[str, str]):
    for index, (school_name, url) in enumerate(roster.items(), start=1):
        yield index, school_name, url
