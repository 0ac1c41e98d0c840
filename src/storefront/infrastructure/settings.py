"""Runtime settings read from the environment.

| Variable                  | Default          |
|---------------------------|------------------|
| STOREFRONT_DATA_DIR       | <repo>/data      |
| STOREFRONT_LOG_LEVEL      | INFO             |
| STOREFRONT_LOG_JSON       | off              |
| STOREFRONT_PRODUCTS_PATH  | /api/products    |
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from storefront.application.catalog_query import DEFAULT_PRODUCTS_PATH

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    data_dir: Path = _DEFAULT_DATA_DIR
    log_level: str = "INFO"
    log_json: bool = False
    products_path: str = DEFAULT_PRODUCTS_PATH

    @property
    def products_file(self) -> Path:
        return self.data_dir / "products.json"

    @property
    def carts_file(self) -> Path:
        return self.data_dir / "carts.json"

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        data_dir = env.get("STOREFRONT_DATA_DIR")
        return Settings(
            data_dir=Path(data_dir) if data_dir else _DEFAULT_DATA_DIR,
            log_level=env.get("STOREFRONT_LOG_LEVEL", "INFO").upper(),
            log_json=env.get("STOREFRONT_LOG_JSON", "").lower() in _TRUTHY,
            products_path=env.get("STOREFRONT_PRODUCTS_PATH", DEFAULT_PRODUCTS_PATH),
        )
