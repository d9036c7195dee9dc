"""例外定義.

ページ単位の失敗 (ExtractionError) とレコード単位の失敗 (DecodeError) を区別する。
各クラスは集計・ログ用の error_code を持つ。
"""


class CollectorError(Exception):
    """コレクタ全体の基底例外."""

    error_code = "COLLECTOR_ERROR"


# --- ページ単位 ---


class ExtractionError(CollectorError):
    """ページ構造が想定 (埋め込みスクリプトがちょうど 1 つ) と一致しない."""

    error_code = "EXTRACTION_ERROR"


class FragmentNotFoundError(ExtractionError):
    error_code = "FRAGMENT_NOT_FOUND"


class AmbiguousFragmentError(ExtractionError):
    error_code = "FRAGMENT_AMBIGUOUS"

    def __init__(self, count: int) -> None:
        super().__init__(f"セレクタが {count} 件にマッチしました")
        self.count = count


# --- レコード単位 ---


class DecodeError(CollectorError):
    """1 レコード分のテキストを解釈できない.

    同じ入力から同じ結果が得られるよう、型とメッセージで等価比較する。
    """

    error_code = "DECODE_ERROR"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DecodeError):
            return NotImplemented
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class DelimiterNotFoundError(DecodeError):
    error_code = "DELIMITER_NOT_FOUND"


class CategoryCountMismatchError(DecodeError):
    error_code = "CATEGORY_COUNT_MISMATCH"

    def __init__(self, found: int, expected: int) -> None:
        super().__init__(f"金額フィールド数が不足: {found} / {expected}")
        self.found = found
        self.expected = expected


class NumericParseError(DecodeError):
    error_code = "NUMERIC_PARSE_FAILURE"

    def __init__(self, field: str, text: str) -> None:
        super().__init__(f"{field} を数値として解釈できません: {text!r}")
        self.field = field
        self.text = text


class InvalidIdentifierError(DecodeError):
    error_code = "INVALID_IDENTIFIER"


class DuplicateRegionError(DecodeError):
    error_code = "DUPLICATE_REGION"

    def __init__(self, region_id: int) -> None:
        super().__init__(f"同一ページ内で FIPS {region_id} が重複しています")
        self.region_id = region_id
