# grantcart/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=ROOT_DIR / ".env")


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_list(*keys: str) -> Tuple[str, ...]:
    v = _get_env(*keys, default="") or ""
    return tuple(part.strip() for part in v.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    cart_storage_path: str
    # GrantRoundManager contract the donations are sent to. Empty disables checkout.
    manager_address: str = ""
    active_rounds: Tuple[str, ...] = field(default_factory=tuple)
    log_level: str = "INFO"
    base_url: str = "http://localhost:8000"
    port: int = 8000


def load_settings() -> Settings:
    return Settings(
        cart_storage_path=_get_env("CART_STORAGE_PATH", default=str(ROOT_DIR / "data" / "cart.json")) or "",
        manager_address=_get_env("GRANT_ROUND_MANAGER_ADDRESS", "MANAGER_ADDRESS", default="") or "",
        active_rounds=_get_list("ACTIVE_ROUNDS", "GRANT_ROUNDS"),
        log_level=_get_env("LOG_LEVEL", default="INFO") or "INFO",
        base_url=_get_env("BASE_URL", default="http://localhost:8000") or "http://localhost:8000",
        port=int(_get_env("PORT", default="8000") or 8000),
    )


settings = load_settings()
