"""Export bundle I/O — the whole ledger in one JSON document.

The bundle is what a user hands to another device (or keeps as a manual
backup).  Importing one is destructive, so parsing is strict and happens
completely before any state is replaced.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError

from timeledger.core.repository import atomic_write
from timeledger.models.bundle import ExportBundle


class BundleValidationError(ValueError):
    """Raised when a bundle document cannot be parsed."""


def dump_bundle(bundle: ExportBundle) -> bytes:
    return bundle.model_dump_json(by_alias=True, indent=2).encode("utf-8")


def parse_bundle(raw: bytes | str) -> ExportBundle:
    """Validate a raw bundle document.

    Accepts both attribute names and the mobile app's keys.
    """
    try:
        return ExportBundle.model_validate_json(raw)
    except ValidationError as exc:
        raise BundleValidationError(f"Invalid export bundle: {exc}") from exc


def write_bundle(bundle: ExportBundle, path: Path) -> Path:
    atomic_write(path, dump_bundle(bundle))
    return path


def read_bundle(path: Path) -> ExportBundle:
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise BundleValidationError(f"Cannot read bundle {path}: {exc}") from exc
    return parse_bundle(raw)
