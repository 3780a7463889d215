import os
import argparse
from pathlib import Path

from dotenv import load_dotenv

from school_scrape.extract import main as extract
from school_scrape.roster import load_roster


def main():

    load_dotenv()

    parser = argparse.ArgumentParser(prog="school_scrape")

    parser.add_argument(
        "-r",
        "--roster",
        type=Path,
        default=Path(os.getenv("SCHOOL_ROSTER", "school_urls.json")),
        help="JSON file mapping school names to their page urls",
    )

    parser.add_argument(
        "-d",
        "--export_path",
        type=Path,
        default=Path(os.getenv("SCHOOL_EXPORT_PATH", ".")),
        help="filepath of the directory where files are exported to",
    )

    parser.add_argument(
        "-hp",
        "--html_path",
        type=Path,
        help="re-extract saved pages from this directory (relative to export_path)",
    )

    parser.add_argument(
        "--headless",
        action="store_true",
        help="run chrome without a visible window",
    )

    parser.add_argument(
        "--no-save-html",
        dest="save_html",
        action="store_false",
        help="do not keep a copy of each school page",
    )

    args = parser.parse_args()

    if args.html_path:
        extract({}, args.export_path, html_path=args.html_path)
        return

    if not args.roster.exists():
        parser.print_help()
        parser.error(f"Roster file {args.roster} does not exist.")

    extract(
        load_roster(args.roster),
        args.export_path,
        headless=args.headless,
        save_pages=args.save_html,
    )


if __name__ == "__main__":
    main()
