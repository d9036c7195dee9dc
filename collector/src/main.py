"""EWG 農業補助金データ収集 — メインエントリーポイント.

処理フロー:
  1. 州 FIPS コード × 年 の組み合わせを列挙
  2. 各組み合わせで地域ページを取得
  3. 埋め込みスクリプトを抽出し、郡ごとのレコードにデコード
  4. ページごとの成功・失敗件数を記録
  5. 全ページの結果を最後に 1 回だけ結合
"""

from __future__ import annotations

import logging
import sys
import time
from datetime import datetime

from src.config import LOG_DIR, STATE_FIPS, YEARS
from src.decoder import partition
from src.errors import ExtractionError
from src.models import PageReport
from src.scraper import fetch_region_page, scrape_one, wait_interval

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """ロギングの初期設定."""
    log_file = LOG_DIR / f"collector_{datetime.now().strftime('%Y%m%d')}.log"
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )


def collect_page(region_fips: str, period: int) -> PageReport:
    """1 ページ分を取得・デコードしてレポートを返す.

    ページ単位の失敗は report.error に記録し、例外は送出しない。
    """
    report = PageReport(region_fips=region_fips, period=period)

    html = fetch_region_page(region_fips, period)
    if html is None:
        report.error = "FETCH_FAILED"
        return report

    try:
        results = scrape_one(html, period)
    except ExtractionError as e:
        logger.error("データ抽出失敗: fips=%s, year=%d, %s", region_fips, period, e)
        report.error = e.error_code
        return report

    report.records, report.failures = partition(results)
    return report


def build_table(reports: list[PageReport]) -> list[dict]:
    """全ページの成功レコードを 1 つのテーブル (dict のリスト) に結合する."""
    return [record.to_row() for report in reports for record in report.records]


def run(
    states: list[str] | None = None,
    years: list[int] | None = None,
) -> tuple[list[dict], list[PageReport]]:
    """メイン処理.

    Returns:
        (結合テーブル, ページごとのレポート)
    """
    states = STATE_FIPS if states is None else states
    years = YEARS if years is None else years

    logger.info("=== 補助金データ収集 開始 ===")
    logger.info("対象: %d 州 × %d 年", len(states), len(years))
    start_time = time.time()

    reports: list[PageReport] = []
    for region_fips in states:
        for period in years:
            logger.info("取得中: fips=%s, year=%d", region_fips, period)
            report = collect_page(region_fips, period)
            reports.append(report)

            if report.error:
                logger.warning("スキップ: fips=%s, year=%d (%s)", region_fips, period, report.error)
            else:
                logger.info("  成功 %d 件 (一部欠損 %d 件), 失敗 %d 件",
                            report.succeeded, report.partial, report.failed)
                for failure in report.failures:
                    logger.warning("    レコード %d: %s %s", failure.index, failure.error_code, failure.error)
                for record in report.records:
                    for e in record.field_errors:
                        logger.warning("    FIPS %d: %s %s", record.region_id, e.error_code, e)

            wait_interval()

    table = build_table(reports)

    # サマリ
    elapsed = time.time() - start_time
    page_errors = sum(1 for r in reports if r.error)
    record_errors = sum(r.failed for r in reports)
    partial = sum(r.partial for r in reports)
    logger.info("=== 補助金データ収集 完了 ===")
    logger.info("ページ: %d 件 (エラー %d 件), レコード: %d 件 (一部欠損 %d 件, 失敗 %d 件), 所要時間: %.1f 秒",
                len(reports), page_errors, len(table), partial, record_errors, elapsed)

    return table, reports


if __name__ == "__main__":
    setup_logging()
    run()
