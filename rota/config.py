from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def _maybe_load_yaml(path: Path) -> Optional[dict]:
    try:
        import yaml  # type: ignore

        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except ModuleNotFoundError:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "YAML config requested but PyYAML is not installed. Install pyyaml or use JSON."
        )


def _load_json(path: Path) -> dict:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


@dataclass
class RotaConfig:
    timezone: Optional[str] = None  # None = system local time
    collection: str = "rota"
    document: str = "shifts"
    initial_days: int = 21
    page_days: int = 14
    step_minutes: int = 30
    serialize_writes: bool = False
    max_write_workers: int = 4


def load_config(path: str | Path) -> RotaConfig:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    if path.suffix.lower() in {".yaml", ".yml"}:
        raw = _maybe_load_yaml(path)
    elif path.suffix.lower() == ".json":
        raw = _load_json(path)
    else:
        raise ValueError("Unsupported config extension. Use .yaml/.yml or .json")
    raw = raw or {}

    store = raw.get("store", {}) or {}
    view = raw.get("view", {}) or {}
    tz = raw.get("timezone")

    cfg = RotaConfig(
        timezone=str(tz) if tz else None,
        collection=str(store.get("collection", "rota")),
        document=str(store.get("document", "shifts")),
        initial_days=int(view.get("initial_days", 21)),
        page_days=int(view.get("page_days", 14)),
        step_minutes=int(view.get("step_minutes", 30)),
        serialize_writes=store.get("serialize_writes", False),
        max_write_workers=int(store.get("max_write_workers", 4)),
    )
    _validate_config(cfg)
    return cfg


def _validate_config(cfg: RotaConfig) -> None:
    if not cfg.collection or not cfg.document:
        raise ValueError("store.collection and store.document must be non-empty")
    if "/" in cfg.collection or "/" in cfg.document:
        raise ValueError("store.collection and store.document must not contain '/'")
    if cfg.initial_days < 0:
        raise ValueError("view.initial_days must be >= 0")
    if cfg.page_days <= 0:
        raise ValueError("view.page_days must be positive")
    if cfg.step_minutes <= 0 or cfg.step_minutes >= 24 * 60:
        raise ValueError("view.step_minutes must be between 1 and 1439")
    if cfg.max_write_workers <= 0:
        raise ValueError("store.max_write_workers must be positive")
    if not isinstance(cfg.serialize_writes, bool):
        raise ValueError(f"store.serialize_writes must be true or false, got {cfg.serialize_writes!r}")
    if cfg.timezone:
        import pandas as pd

        try:
            pd.Timestamp.now(tz=cfg.timezone)
        except Exception as e:
            raise ValueError(f"Unknown timezone '{cfg.timezone}': {e}")
