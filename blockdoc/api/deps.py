import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from blockdoc.adapters.sqlite.drafts import SQLiteDraftStore
from blockdoc.domain.blocks import BlockValidator
from blockdoc.rules.loader import load_rules
from blockdoc.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("BLOCKDOC_DATA_DIR", "./data"))
        self.db_path = f"{self.data_dir}/blockdoc.db"
        self.rules_path = Path(os.environ.get("BLOCKDOC_RULES_PATH", self.base_dir / "rules.yaml"))
        origins = os.environ.get("BLOCKDOC_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
        self.cors_origins = [o.strip() for o in origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def _rules_at(path: Path) -> Rules:
    return load_rules(path)


def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _rules_at(settings.rules_path)


def get_block_validator(rules: Rules = Depends(get_rules)) -> BlockValidator:
    return BlockValidator(rules)


# --- Stores ---
@lru_cache
def _draft_store_at(db_path: str) -> SQLiteDraftStore:
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    store = SQLiteDraftStore(db_path)
    store.ensure_schema()
    return store


def get_draft_store(settings: Settings = Depends(get_settings)) -> SQLiteDraftStore:
    return _draft_store_at(settings.db_path)
