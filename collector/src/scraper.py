"""EWG 地域ページの取得・解析モジュール.

取得した HTML は extractor → decoder の順に処理する。
"""

from __future__ import annotations

import logging
import random
import time

import requests

from src.config import (
    EWG_BASE_URL,
    REGION_URL_TEMPLATE,
    REQUEST_INTERVAL_MAX,
    REQUEST_INTERVAL_MIN,
    REQUEST_TIMEOUT,
    USER_AGENT,
)
from src.decoder import decode
from src.extractor import extract
from src.models import Record, RecordFailure

logger = logging.getLogger(__name__)


def build_region_url(region_fips: str, period: int) -> str:
    """州 FIPS コードと年から地域ページの URL を組み立てる."""
    return REGION_URL_TEMPLATE.format(base=EWG_BASE_URL, fips=region_fips, year=period)


def fetch_region_page(region_fips: str, period: int) -> str | None:
    """地域ページの HTML を取得する.

    Args:
        region_fips: 州レベル FIPS コード (例: "53000")
        period: 年 (例: 2017)

    Returns:
        HTML 文字列。失敗時は None。
    """
    url = build_region_url(region_fips, period)
    headers = {
        "User-Agent": USER_AGENT,
        "Accept-Language": "en-US,en;q=0.9",
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    }

    try:
        resp = requests.get(url, headers=headers, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
        return resp.text
    except requests.RequestException as e:
        logger.error("地域ページ取得失敗: fips=%s, year=%d, error=%s", region_fips, period, e)
        return None


def wait_interval() -> None:
    """リクエスト間隔を 1〜3 秒ランダムで待機する."""
    interval = random.uniform(REQUEST_INTERVAL_MIN, REQUEST_INTERVAL_MAX)
    time.sleep(interval)


def scrape_one(raw_page: str, period: int) -> list[Record | RecordFailure]:
    """1 ページ分の HTML をレコードに変換する.

    ExtractionError はそのまま呼び出し元に送出する。
    """
    return decode(extract(raw_page), period)
