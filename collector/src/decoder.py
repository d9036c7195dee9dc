"""地図データブロックを郡ごとのレコードに分解するモジュール.

ブロックは次のような文字列の繰り返しになっている:

    C53001",value: "...<b>$1,234.00</b>...<td>$500.00</td>...<td>$734.00</td>..."

処理手順:
  A. "C" + 5 桁の直前で分割し、先頭（前置き）を捨てる
  B. 最初の '",value' で識別子と本体に分ける
  C. 本体を "$" で 6 分割し、先頭を捨てる
  D. 各金額の後ろのタグ以降を削る（合計は </b>、他は </td>）
  E. カンマを除いて Decimal に変換、識別子は数値化
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal

from src.errors import (
    CategoryCountMismatchError,
    DecodeError,
    DelimiterNotFoundError,
    DuplicateRegionError,
    InvalidIdentifierError,
    NumericParseError,
)
from src.models import CATEGORIES, Record, RecordFailure

logger = logging.getLogger(__name__)

ID_PREFIX = "C"
ID_PAYLOAD_DELIMITER = '",value'
AMOUNT_DELIMITER = "$"
TOTAL_TERMINATOR = "</b>"
CATEGORY_TERMINATOR = "</td>"

# 分割位置はマーカーの直前（マーカーは後ろのレコードに残す）
_RECORD_BOUNDARY = re.compile(r"(?=C[0-9]{5}(?![0-9]))")
_AMOUNT_PATTERN = re.compile(r"[0-9]+(?:\.[0-9]+)?")
_DIGITS = re.compile(r"[0-9]+")


def decode(block: str, period: int) -> list[Record | RecordFailure]:
    """ブロック全体をデコードする.

    失敗はレコード単位で RecordFailure として返し、他のレコードの処理は続ける。

    Returns:
        レコード順の Record / RecordFailure のリスト
    """
    results: list[Record | RecordFailure] = []
    seen: set[int] = set()

    for index, chunk in enumerate(split_records(block)):
        try:
            record = decode_chunk(chunk, period)
            if record.region_id in seen:
                raise DuplicateRegionError(record.region_id)
        except DecodeError as e:
            results.append(RecordFailure(index=index, chunk=chunk, error=e))
            continue

        seen.add(record.region_id)
        results.append(record)

    logger.debug("デコード完了: %d 件 (period=%d)", len(results), period)
    return results


def partition(
    results: list[Record | RecordFailure],
) -> tuple[list[Record], list[RecordFailure]]:
    """decode の結果を成功と失敗に分ける."""
    records = [r for r in results if isinstance(r, Record)]
    failures = [r for r in results if isinstance(r, RecordFailure)]
    return records, failures


def split_records(block: str) -> list[str]:
    """ブロックをレコード単位に分割する（前置き部分は捨てる）."""
    return _RECORD_BOUNDARY.split(block)[1:]


def decode_chunk(chunk: str, period: int) -> Record:
    """1 レコード分のテキストを Record に変換する.

    金額の数値化失敗はレコード全体を失敗にせず、その項目を None にして
    Record.field_errors に記録する。

    Raises:
        DecodeError: 区切り・金額数・識別子のいずれかを解釈できない場合
    """
    identifier, payload = _split_identifier(chunk)
    fragments = _split_amounts(payload)
    region_id = _parse_identifier(identifier)

    values = {}
    field_errors = []
    for name, fragment in zip(CATEGORIES, fragments):
        terminator = TOTAL_TERMINATOR if name == "total" else CATEGORY_TERMINATOR
        try:
            values[name] = _parse_amount(name, _strip_trailing(fragment, terminator))
        except NumericParseError as e:
            values[name] = None
            field_errors.append(e)

    return Record(
        region_id=region_id,
        period=period,
        field_errors=tuple(field_errors),
        **values,
    )


def _split_identifier(chunk: str) -> tuple[str, str]:
    identifier, sep, payload = chunk.partition(ID_PAYLOAD_DELIMITER)
    if not sep:
        raise DelimiterNotFoundError(f"{ID_PAYLOAD_DELIMITER!r} が見つかりません: {chunk[:40]!r}")
    return identifier, payload


def _split_amounts(payload: str) -> list[str]:
    parts = payload.split(AMOUNT_DELIMITER, len(CATEGORIES))
    if len(parts) < len(CATEGORIES) + 1:
        raise CategoryCountMismatchError(len(parts) - 1, len(CATEGORIES))
    # 先頭は最初の金額より前のテキスト
    return parts[1:]


def _strip_trailing(fragment: str, terminator: str) -> str:
    """terminator 以降を削る。無ければそのまま返す."""
    return fragment.split(terminator, 1)[0]


def _parse_amount(name: str, text: str) -> Decimal:
    cleaned = text.replace(",", "").strip()
    if not _AMOUNT_PATTERN.fullmatch(cleaned):
        raise NumericParseError(name, text)
    return Decimal(cleaned)


def _parse_identifier(text: str) -> int:
    digits = text.strip().removeprefix(ID_PREFIX)
    if not _DIGITS.fullmatch(digits):
        raise InvalidIdentifierError(f"識別子が不正です: {text!r}")
    return int(digits)
