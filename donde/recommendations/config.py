from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "processed"


@dataclass(frozen=True)
class EngineConfig:
    pool_size: int = 30
    top_n: int = 10
    metadata_top_n: int = 5
    metadata_timeout: float = 1.5
    cache_ttl: float = 300.0
    fallback_cache_ttl: float = 60.0
    max_exclusions: int = 15
    rejection_threshold: int = 2
    max_per_cuisine: int = 3
    max_per_area: int = 4
    protected_positions: int = 3
    local_timezone: str = "America/Chicago"
    data_dir: Path = Path(os.getenv("DONDE_DATA_DIR", str(_DEFAULT_DATA_DIR)))


DEFAULT_ENGINE_CONFIG = EngineConfig()
