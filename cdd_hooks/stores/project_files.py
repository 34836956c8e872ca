"""Readers for the `.cdd/` project documents."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from ..logging import get_logger
from ..simple_yaml import parse_simple_yaml

CDD_DIRNAME = ".cdd"
STATE_FILE = "state.yaml"
CONFIG_FILE = "config.yaml"
CONTRACTS_DIR = "contracts"

_logger = get_logger("stores")


def find_cdd_root(cwd: Path | str | None) -> Optional[Path]:
    """Return ``<cwd>/.cdd`` when it holds a state document, else None."""
    if cwd is None:
        return None
    try:
        cdd_root = Path(cwd) / CDD_DIRNAME
        if (cdd_root / STATE_FILE).is_file():
            return cdd_root
    except (OSError, ValueError):
        return None
    return None


def read_state_document(cdd_root: Path) -> Optional[Dict[str, Any]]:
    """Parse ``state.yaml``; None when it is missing or unreadable."""
    return _read_document(cdd_root / STATE_FILE)


def read_config_document(cdd_root: Path) -> Optional[Dict[str, Any]]:
    """Parse ``config.yaml``; None when it is missing or unreadable."""
    return _read_document(cdd_root / CONFIG_FILE)


def read_contract(cdd_root: Path, module: str) -> Optional[Dict[str, Any]]:
    """Parse the contract document for ``module``."""
    return _read_document(cdd_root / CONTRACTS_DIR / f"{module}.yaml")


def _read_document(path: Path) -> Optional[Dict[str, Any]]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as exc:
        _logger.debug("Unable to read %s: %s", path, exc)
        return None
    return parse_simple_yaml(text)


__all__ = [
    "CDD_DIRNAME",
    "find_cdd_root",
    "read_config_document",
    "read_contract",
    "read_state_document",
]
