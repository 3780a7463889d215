import pytest

import school_scrape.extract


SUMMARY_HTML = """
<html>
<body>
  <h1> Maple Elementary </h1>
  <div class="stat"><span class="label">Pass %  Rate help</span><span>87.5</span></div>
  <div class="stat"><div class="flex label">Student Enrolment</div><div> 412 </div></div>
  <div class="stat"><span class="label">Grade range</span><span>  </span></div>
  <div class="rating"> 7.4 </div>
  <div class="rank">12/944 help</div>
  <button>Chart</button><button>Table</button>
</body>
</html>
"""

RESULTS_TABLE = """
<table>
  <tr><th>Gr 4</th><th>2022</th><th>2021</th><th>2020</th><th>2019</th><th>2018</th></tr>
  <tr><td>Reading help</td><td>500</td><td>490</td><td>480</td><td>470</td><td>460</td></tr>
  <tr><td>Gr 7 Avg</td></tr>
  <tr><td>Attendance</td><td>95</td><td>94</td><td>93</td><td>92</td><td>91</td></tr>
  <tr><td>Writing</td><td>510</td><td>505</td><td>500</td><td>495</td><td>490</td></tr>
  <tr><td>Gender gap</td></tr>
  <tr><td>Numeracy</td><td>2</td><td></td><td>3 help</td></tr>
  <tr><td>Below expectations (%)</td><td>12.5</td><td>11.0</td><td>10.1</td><td>9.0</td><td>8.8</td></tr>
  <tr><td>Overall rating out of 10</td><td>7.4</td><td>7.1</td><td>6.9</td><td>6.8</td><td>6.5</td></tr>
</table>
"""

TABLE_HTML = SUMMARY_HTML.replace("</body>", RESULTS_TABLE + "</body>")


class FakeButton:
    def __init__(self, driver):
        self.driver = driver

    def click(self):
        self.driver.table_view = True


class FakeDriver:
    """Stands in for a selenium WebDriver serving canned pages."""

    def __init__(self, pages, failing=()):
        self.pages = pages
        self.failing = set(failing)
        self.visited = []
        self.current_url = None
        self.table_view = False
        self.quit_called = False

    def get(self, url):
        self.visited.append(url)
        if url in self.failing:
            raise RuntimeError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        self.current_url = url
        self.table_view = False

    @property
    def page_source(self):
        summary_html, table_html = self.pages[self.current_url]
        return table_html if self.table_view else summary_html

    def find_elements(self, by, value):
        return [FakeButton(self)]

    def quit(self):
        self.quit_called = True


@pytest.fixture(autouse=True)
def sleeps(monkeypatch):
    sleeps = []
    monkeypatch.setattr(school_scrape.extract.time, "sleep", sleeps.append)
    return sleeps


@pytest.fixture
def summary_html():
    return SUMMARY_HTML


@pytest.fixture
def table_html():
    return TABLE_HTML
