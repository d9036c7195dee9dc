"""地域ページから地図データ用の埋め込みスクリプトを取り出すモジュール.

データは #main_content_area 直下 4 番目の <script> に文字列として埋め込まれている。
位置は事前にページを確認して決めた固定値で、実行時に探索はしない。
"""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup

from src.errors import AmbiguousFragmentError, FragmentNotFoundError

logger = logging.getLogger(__name__)

MAP_DATA_SELECTOR = "#main_content_area > script:nth-child(4)"

_WHITESPACE = re.compile(r"\s+")


def extract(raw_markup: str) -> str:
    """ページ HTML から地図データブロックのテキストを返す.

    Raises:
        FragmentNotFoundError: セレクタに一致する要素がない
        AmbiguousFragmentError: セレクタに一致する要素が複数ある
    """
    soup = BeautifulSoup(raw_markup, "html.parser")
    nodes = soup.select(MAP_DATA_SELECTOR)

    if not nodes:
        raise FragmentNotFoundError(f"{MAP_DATA_SELECTOR} に一致する要素がありません")
    if len(nodes) > 1:
        raise AmbiguousFragmentError(len(nodes))

    text = _WHITESPACE.sub(" ", nodes[0].get_text()).strip()
    logger.debug("地図データブロック取得: %d 文字", len(text))
    return text
