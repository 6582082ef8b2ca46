import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_path: Path
    storage_key: str = "financeTransactions"
    autosave_seconds: float = 30.0
    log_level: str = "INFO"


def get_settings() -> Settings:
    raw_dir = os.getenv("LEDGER_DATA_DIR", "").strip()
    data_dir = Path(raw_dir) if raw_dir else Path.cwd() / ".data"
    return Settings(
        data_dir=data_dir,
        db_path=data_dir / "ledger.sqlite",
        autosave_seconds=float(os.getenv("LEDGER_AUTOSAVE_SECONDS", "30") or 0),
        log_level=(os.getenv("LEDGER_LOG_LEVEL", "INFO") or "INFO").strip().upper(),
    )
