from __future__ import annotations

import os
from pathlib import Path

import platformdirs
import yaml
from dotenv import load_dotenv

APP_NAME = "freshbill"


def _resolve_config_dir_for_dotenv() -> Path | None:
    """Resolve config dir for .env loading without depending on env vars from .env itself.

    Uses the same 3-tier resolution as _resolve_dir but only checks sources
    available before .env is loaded (env var set in shell, dev layout).
    Returns None if only platformdirs would resolve (since the dir may not exist yet).
    """
    from_env = os.environ.get("FRESHBILL_CONFIG_DIR")
    if from_env:
        return Path(from_env)
    project_root = Path(__file__).resolve().parent.parent.parent
    candidate = project_root / "config"
    if candidate.is_dir():
        return candidate
    pd = Path(platformdirs.user_config_dir(APP_NAME))
    if pd.is_dir():
        return pd
    return None


# Load .env: cwd first (highest priority), then config dir (won't override)
load_dotenv()
_cfg_dir = _resolve_config_dir_for_dotenv()
if _cfg_dir is not None:
    load_dotenv(_cfg_dir / ".env")


def _resolve_dir(env_var: str, default_subdir: str, kind: str) -> Path:
    """Resolve a directory from env var, repo layout, or platform default.

    Priority: 1) env var, 2) dev repo layout, 3) platformdirs user directory.
    """
    from_env = os.environ.get(env_var)
    if from_env:
        return Path(from_env)
    # Development layout: src/freshbill/config.py -> ../../.. = project root
    project_root = Path(__file__).resolve().parent.parent.parent
    candidate = project_root / default_subdir
    if candidate.is_dir():
        return candidate
    if kind == "config":
        return Path(platformdirs.user_config_dir(APP_NAME))
    return Path(platformdirs.user_data_dir(APP_NAME))


def get_config_dir() -> Path:
    """Resolve config directory. Re-evaluated on each call to pick up env changes."""
    return _resolve_dir("FRESHBILL_CONFIG_DIR", "config", kind="config")


def get_data_dir() -> Path:
    """Resolve data directory. Re-evaluated on each call to pick up env changes."""
    return _resolve_dir("FRESHBILL_DATA_DIR", "data", kind="data")


# --- Storage keys ---

INVOICE_KEY = "freshfruits_invoice"
PRODUCTS_LONG_KEY = "freshfruits_products_cache"
PRODUCTS_SHORT_KEY = "freshfruits_products"

# Kept short so price edits in the sheet show up while testing interactively.
LONG_TIER_TTL = 60.0
SHORT_TIER_TTL = 30.0

FEED_TIMEOUT = 15

DUE_DAYS = 7


def get_feed_url() -> str | None:
    """Return the published CSV feed URL, or None to use the static catalog."""
    url = os.environ.get("FRESHBILL_FEED_URL", "").strip()
    return url or None


# --- YAML config ---


def load_yaml(path: Path) -> dict:
    """Load and parse a YAML file, returning the top-level dict."""
    return yaml.safe_load(path.read_text()) or {}


def load_company() -> dict:
    """Load the company profile from config/company.yaml ({} when absent)."""
    path = get_config_dir() / "company.yaml"
    if not path.is_file():
        return {}
    return load_yaml(path)


def load_static_products() -> list[dict] | None:
    """Load a static product table from config/products.yaml, if present."""
    path = get_config_dir() / "products.yaml"
    if not path.is_file():
        return None
    data = load_yaml(path)
    if isinstance(data, dict):
        data = data.get("products", [])
    return list(data)


def get_export_dir() -> Path:
    """Default directory for exported PDFs."""
    return get_data_dir() / "exports"
