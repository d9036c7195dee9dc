"""main モジュールのテスト（ネットワークはモック）."""

import logging
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

from src.main import build_table, collect_page, run
from src.models import PageReport, Record

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _load_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


def _record(region_id: int, period: int, total: str = "1.00") -> Record:
    zero = Decimal("0")
    return Record(
        region_id=region_id,
        total=Decimal(total),
        commodity=Decimal(total),
        conservation=zero,
        disaster=zero,
        insurance=zero,
        period=period,
    )


class TestCollectPage:
    """collect_page のテスト."""

    @patch("src.main.fetch_region_page")
    def test_success(self, mock_fetch):
        mock_fetch.return_value = _load_fixture("region_page.html")

        report = collect_page("53000", 2017)

        mock_fetch.assert_called_once_with("53000", 2017)
        assert report.error is None
        assert report.ok
        assert report.succeeded == 3
        assert report.failed == 0
        assert {r.period for r in report.records} == {2017}

    @patch("src.main.fetch_region_page")
    def test_fetch_failed(self, mock_fetch):
        mock_fetch.return_value = None

        report = collect_page("53000", 2017)

        assert report.error == "FETCH_FAILED"
        assert report.records == []

    @patch("src.main.fetch_region_page")
    def test_fragment_not_found(self, mock_fetch):
        mock_fetch.return_value = "<html><body></body></html>"

        report = collect_page("53000", 2017)

        assert report.error == "FRAGMENT_NOT_FOUND"
        assert not report.ok

    @patch("src.main.fetch_region_page")
    def test_record_failures_reported(self, mock_fetch):
        html = _load_fixture("region_page.html").replace('C53003",value', 'C53003",label')
        mock_fetch.return_value = html

        report = collect_page("53000", 2017)

        assert report.error is None
        assert report.succeeded == 2
        assert report.failed == 1
        assert report.failures[0].error_code == "DELIMITER_NOT_FOUND"

    @patch("src.main.fetch_region_page")
    def test_partial_record_kept(self, mock_fetch):
        """金額 1 項目だけ壊れたレコードは欠損付きで成功側に残ること."""
        html = _load_fixture("region_page.html").replace("$234.56", "$n/a")
        mock_fetch.return_value = html

        report = collect_page("53000", 2017)

        assert report.succeeded == 3
        assert report.failed == 0
        assert report.partial == 1
        assert not report.ok
        asotin = report.records[1]
        assert asotin.region_id == 53003
        assert asotin.conservation is None
        assert asotin.total == Decimal("1234.56")
        assert [e.field for e in asotin.field_errors] == ["conservation"]
        assert build_table([report])[1]["conservation"] is None


class TestBuildTable:
    """build_table のテスト."""

    def test_concatenates_in_report_order(self):
        reports = [
            PageReport("53000", 2010, records=[_record(53001, 2010), _record(53003, 2010)]),
            PageReport("16000", 2010, error="FETCH_FAILED"),
            PageReport("16000", 2011, records=[_record(16001, 2011, "2.50")]),
        ]

        table = build_table(reports)

        assert [(row["fips"], row["year"]) for row in table] == [
            (53001, 2010),
            (53003, 2010),
            (16001, 2011),
        ]
        assert list(table[0]) == [
            "fips", "total", "commodity", "conservation", "disaster", "insurance", "year",
        ]
        assert table[2]["total"] == Decimal("2.50")

    def test_empty(self):
        assert build_table([]) == []


class TestRun:
    """run のテスト."""

    @patch("src.main.wait_interval")
    @patch("src.main.fetch_region_page")
    def test_grid(self, mock_fetch, mock_wait):
        html = _load_fixture("region_page.html")
        mock_fetch.side_effect = lambda fips, year: html if fips == "53000" else None

        table, reports = run(states=["53000", "16000"], years=[2010, 2011])

        assert [(r.region_fips, r.period) for r in reports] == [
            ("53000", 2010),
            ("53000", 2011),
            ("16000", 2010),
            ("16000", 2011),
        ]
        assert mock_wait.call_count == 4
        assert [r.error for r in reports] == [None, None, "FETCH_FAILED", "FETCH_FAILED"]
        assert len(table) == 6
        keys = {(row["fips"], row["year"]) for row in table}
        assert len(keys) == len(table)

    @patch("src.main.wait_interval")
    @patch("src.main.fetch_region_page")
    def test_record_failure_logged_once(self, mock_fetch, mock_wait, caplog):
        """レコード失敗のログはページ単位で 1 回だけ出ること."""
        html = _load_fixture("region_page.html").replace('C53003",value', 'C53003",label')
        mock_fetch.return_value = html

        with caplog.at_level(logging.WARNING):
            run(states=["53000"], years=[2017])

        messages = [r.getMessage() for r in caplog.records]
        assert sum("DELIMITER_NOT_FOUND" in m for m in messages) == 1
