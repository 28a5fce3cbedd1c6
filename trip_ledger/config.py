import logging
import yaml
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

CFG_PATH = Path(__file__).parent / 'data' / 'ledger_config.yaml'

_config_cache = None

def load_config() -> Dict[str, Any]:
    """Load the ledger configuration, once per process"""
    global _config_cache

    if _config_cache is not None:
        return _config_cache

    if not CFG_PATH.exists():
        raise FileNotFoundError(f"Ledger config not found at {CFG_PATH}")

    cfg = yaml.safe_load(CFG_PATH.read_text(encoding='utf-8')) or {}
    logger.debug(f"Loaded ledger config from {CFG_PATH}")
    _config_cache = cfg
    return cfg

def currency_symbol() -> str:
    return load_config().get('currency_symbol', '')

def category_names() -> Dict[str, str]:
    """Category id → display name"""
    return {c['id']: c['name'] for c in load_config().get('categories', [])}

def category_label(category: str) -> str:
    return category_names().get(category, category)
