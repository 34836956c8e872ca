"""Durable storage for project documents and the monitor snapshot."""

from .monitor import monitor_path, read_snapshot, write_snapshot
from .project_files import (
    CDD_DIRNAME,
    find_cdd_root,
    read_config_document,
    read_contract,
    read_state_document,
)

__all__ = [
    "CDD_DIRNAME",
    "find_cdd_root",
    "monitor_path",
    "read_config_document",
    "read_contract",
    "read_snapshot",
    "read_state_document",
    "write_snapshot",
]
