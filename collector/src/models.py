"""データモデル定義."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from src.errors import DecodeError, NumericParseError

# 金額カテゴリ（この順序で固定）
CATEGORIES = ("total", "commodity", "conservation", "disaster", "insurance")


@dataclass(frozen=True)
class Record:
    """郡 (county) 1 件 × 1 年分の補助金額.

    数値化できなかった金額は None とし、その理由を field_errors に残す。
    """

    region_id: int  # 郡の FIPS コード (例: 53001)
    total: Decimal | None
    commodity: Decimal | None
    conservation: Decimal | None
    disaster: Decimal | None
    insurance: Decimal | None
    period: int  # 年
    field_errors: tuple[NumericParseError, ...] = ()

    @property
    def category_values(self) -> tuple[Decimal | None, ...]:
        """5 カテゴリの金額を固定順で返す."""
        return tuple(getattr(self, name) for name in CATEGORIES)

    @property
    def complete(self) -> bool:
        return not self.field_errors

    def to_row(self) -> dict:
        """結合テーブル用のフラットな dict に変換する."""
        row: dict = {"fips": self.region_id}
        row.update(zip(CATEGORIES, self.category_values))
        row["year"] = self.period
        return row


@dataclass(frozen=True)
class RecordFailure:
    """デコードに失敗した 1 レコード."""

    index: int  # ページ内のレコード位置（0 始まり）
    chunk: str  # 元テキスト
    error: DecodeError

    @property
    def error_code(self) -> str:
        return self.error.error_code


@dataclass
class PageReport:
    """1 ページ (州 × 年) の処理結果."""

    region_fips: str
    period: int
    records: list[Record] = field(default_factory=list)
    failures: list[RecordFailure] = field(default_factory=list)
    error: str | None = None  # ページ単位のエラーコード

    @property
    def succeeded(self) -> int:
        return len(self.records)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def partial(self) -> int:
        """一部の金額が欠けたレコード数."""
        return sum(1 for r in self.records if not r.complete)

    @property
    def ok(self) -> bool:
        return self.error is None and not self.failures and not self.partial
