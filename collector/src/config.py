"""設定モジュール — 環境変数・定数定義."""

import os
from pathlib import Path

from dotenv import load_dotenv

# .env はプロジェクトルートに配置
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

# --- EWG 農業補助金データベース ---
EWG_BASE_URL: str = os.environ.get("EWG_BASE_URL", "https://farm.ewg.org/region.php")
REGION_URL_TEMPLATE = "{base}?fips={fips}&progcode=total&yr={year}"

# --- 収集対象 ---
YEAR_START = int(os.environ.get("COLLECT_YEAR_START", "2010"))
YEAR_END = int(os.environ.get("COLLECT_YEAR_END", "2019"))  # この年を含む
YEARS = list(range(YEAR_START, YEAR_END + 1))

# 州レベル FIPS コード（50 州 + DC、末尾 "000"）
_DEFAULT_STATE_CODES = [
    "01", "02", "04", "05", "06", "08", "09", "10", "11", "12",
    "13", "15", "16", "17", "18", "19", "20", "21", "22", "23",
    "24", "25", "26", "27", "28", "29", "30", "31", "32", "33",
    "34", "35", "36", "37", "38", "39", "40", "41", "42", "44",
    "45", "46", "47", "48", "49", "50", "51", "53", "54", "55",
    "56",
]
_states_env = os.environ.get("COLLECT_STATES", "")
STATE_FIPS: list[str] = (
    [s.strip() for s in _states_env.split(",") if s.strip()]
    if _states_env
    else [f"{code}000" for code in _DEFAULT_STATE_CODES]
)

# --- User-Agent ---
USER_AGENT = os.environ.get(
    "USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36",
)

# --- リクエスト設定 ---
REQUEST_INTERVAL_MIN = 1.0
REQUEST_INTERVAL_MAX = 3.0
REQUEST_TIMEOUT = 15  # 秒

# --- ログ ---
LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOG_DIR.mkdir(exist_ok=True)
