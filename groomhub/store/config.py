from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_DEFAULT_SEED = Path(__file__).resolve().parent.parent / "data" / "seed.json"


@dataclass(frozen=True)
class StoreConfig:
    """
    Where the document store loads its collections from.
    """

    seed_path: Path = Path(os.getenv("GROOMHUB_SEED_PATH", str(_DEFAULT_SEED)))


DEFAULT_STORE_CONFIG = StoreConfig()
