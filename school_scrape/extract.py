# This is the webscraping script for school detail pages (summary + results table)
import re
import time
from datetime import datetime
from enum import Enum
from pathlib import Path
from urllib.parse import quote, unquote

from bs4 import BeautifulSoup
from selenium import webdriver
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.common.by import By
from tqdm import tqdm

from school_scrape.export import save_records
from school_scrape.roster import iterate_roster


FILENAME = "School-Page"
YEARS = ["2022", "2021", "2020", "2019", "2018"]
GRADE_METRICS = ["Reading", "Writing", "Literacy", "Numeracy"]
OVERALL_METRICS = [
    "Below expectations (%)",
    "Tests not written (%)",
    "Overall rating out of 10",
]
METRICS = GRADE_METRICS + OVERALL_METRICS
MISSING_VALUE = "n/a"

# seconds
NAVIGATION_DELAY = 2
TABLE_VIEW_DELAY = 2
SCHOOL_DELAY = 1


class Section(Enum):
    GR4 = "gr4"
    GR7 = "gr7"
    GR7_GENDER_GAP = "gr7_gender_gap"


SECTION_HEADERS = [
    (("gr 4", "grade 4"), Section.GR4),
    (("gr 7 avg", "grade 7 avg"), Section.GR7),
    (("gender gap",), Section.GR7_GENDER_GAP),
]


def get_text(element):
    return element.get_text().strip() if element is not None else ""


def clean_label(text: str) -> str:
    return re.sub(r"\s*help\Z", "", text).strip()


def normalize_label_key(label_text: str) -> str:
    key = label_text.replace("%", "Percent")
    key = re.sub(r"\s+", "_", key)
    return re.sub(r"[^a-zA-Z0-9_]", "", key)


def extract_summary(page_source) -> dict[str, str]:

    soup = BeautifulSoup(page_source, "html.parser")
    data = {}

    heading = soup.find("h1")
    if heading is not None:
        data["name"] = get_text(heading)

    for label in soup.select(".label, .flex.label"):
        label_text = clean_label(label.get_text())
        value = get_text(label.find_next_sibling())

        if label_text and value:
            data[normalize_label_key(label_text)] = value

    score = soup.select_one(".rating")
    if score is None:
        score = soup.select_one('[class*="score"]')
    rank = soup.select_one(".rank")

    if score is not None:
        data["score"] = get_text(score)

    if rank is not None:
        data["rank"] = get_text(rank).replace("help", "", 1)

    return data


def classify_row(row_text: str):
    """Returns the Section a header row opens, or None for any other row."""

    for patterns, section in SECTION_HEADERS:
        if any(pattern in row_text for pattern in patterns):
            return section

    return None


def metric_key(metric: str, year: str, section: Section) -> str:
    base_key = re.sub(r"\s+", "_", re.sub(r"[()%]", "", metric.lower()))

    if metric in OVERALL_METRICS:
        return f"{base_key}_{year}"

    return f"{section.value}_{base_key}_{year}"


def extract_metric_row(metric: str, cells, section: Section) -> dict[str, str]:
    """Reads the year columns that follow the metric name cell.

    `cells` excludes the metric name itself, so cells[i] lines up with YEARS[i].
    Missing or blank cells are reported as MISSING_VALUE.
    """

    data = {}

    for index, year in enumerate(YEARS):
        value = get_text(cells[index]) if index < len(cells) else ""
        value = re.sub(r"\s*help\s*", "", value or MISSING_VALUE, count=1)
        data[metric_key(metric, year, section)] = value

    return data


def extract_performance(page_source) -> dict[str, str]:

    soup = BeautifulSoup(page_source, "html.parser")
    data = {}
    section = Section.GR4

    for row in soup.select("table tr"):
        header = classify_row(row.get_text().strip().lower())

        if header is not None:
            section = header
            continue

        cells = row.find_all("td")
        first_cell = get_text(cells[0]) if cells else ""
        if not first_cell:
            continue

        metric = re.sub(r"\s*help\s*$", "", first_cell)
        if metric not in METRICS:
            continue

        data |= extract_metric_row(metric, cells[1:], section)

    return data


def extract(page_source, school_name, table_page_source=None) -> dict[str, str]:
    """Summary fields from `page_source`, results from `table_page_source`.

    Both are read from `page_source` when no separate table view is given.
    """

    if table_page_source is None:
        table_page_source = page_source

    school_data = extract_summary(page_source)
    school_data["school_name"] = school_name

    return school_data | extract_performance(table_page_source)


def school_name_from_file(file: Path) -> str:
    # School-Page_<quoted school name>-<%Y-%m-%d-%H%M%S-%f>.html
    return unquote("-".join(file.name.split("_", 1)[-1].split("-")[:-5]))


def extract_files(files: list[Path]):

    extracted = []

    for file in tqdm(files, desc="Extracting Files..."):
        school_name = school_name_from_file(file)

        try:
            with open(file, "r", encoding="utf-8") as f:
                extracted.append(extract(f.read(), school_name))
        except Exception as e:
            tqdm.write(f"Error with school {school_name}: {e}")

    return extracted


def save_html(
    page_source,
    filepath: Path,
    filename: str,
    *additional_info,
):

    filepath.mkdir(parents=True, exist_ok=True)

    soup = BeautifulSoup(page_source, "html.parser")
    timestamp = datetime.strftime(datetime.now(), "%Y-%m-%d-%H%M%S-%f")
    additional_info = [quote(str(i), safe="") for i in additional_info]

    with open(
        filepath
        / (
            f"{filename}_{'-'.join(additional_info)}"
            f"{'-' if additional_info else ''}{timestamp}.html"
        ),
        "w",
        encoding="utf-8",
    ) as f:
        f.write(str(soup))


def open_driver(headless=False):
    chrome_service = Service()
    chrome_options = Options()
    chrome_options.add_argument("incognito")
    chrome_options.add_argument("window-size=1366,768")
    if headless:
        chrome_options.add_argument("headless")

    return webdriver.Chrome(service=chrome_service, options=chrome_options)


def open_table_view(driver):
    table_tabs = driver.find_elements(By.XPATH, "//button[contains(., 'Table')]")
    if table_tabs:
        table_tabs[0].click()

    # Waits even when there is no Table button; content renders asynchronously
    time.sleep(TABLE_VIEW_DELAY)


def scrape_school(driver, school_name, url, html_path: Path = None):

    driver.get(url)
    time.sleep(NAVIGATION_DELAY)

    summary_page_source = driver.page_source

    tqdm.write("Clicking Table tab...")
    open_table_view(driver)

    table_page_source = driver.page_source

    if html_path:
        save_html(table_page_source, html_path, FILENAME, school_name)

    return extract(summary_page_source, school_name, table_page_source)


def main(
    roster: dict[str, str],
    export_path: Path,
    html_path: Path = None,
    headless=False,
    save_pages=True,
    driver=None,
):

    export_path = Path(export_path)

    if html_path:
        html_files = filter(
            lambda f: f.name.endswith(".html"),
            (export_path / html_path).iterdir(),
        )
        schools = extract_files(sorted(html_files, key=lambda x: x.stat().st_ctime))
        save_records(schools, export_path)
        return schools

    schools = []
    total_schools = len(roster)

    try:
        if driver is None:
            driver = open_driver(headless)

        with tqdm(total=total_schools) as p_bar:
            for index, school_name, url in iterate_roster(roster):
                p_bar.desc = f"Processing {school_name}"
                tqdm.write(
                    f"Processing school {index}/{total_schools}: {school_name}"
                )

                try:
                    schools.append(
                        scrape_school(
                            driver,
                            school_name,
                            url,
                            export_path / "HTML_FILES" if save_pages else None,
                        )
                    )
                    tqdm.write(f"Scraped: {school_name}")
                    time.sleep(SCHOOL_DELAY)

                except Exception as e:
                    tqdm.write(f"Error with school {school_name}: {e}")

                p_bar.update(1)

    except Exception as e:
        print(f"Error: {e}")

    finally:
        if driver is not None:
            try:
                driver.quit()
            except Exception as e:
                print(f"Error: {e}")

        save_records(schools, export_path)

    return schools
