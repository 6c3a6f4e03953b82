"""Baseline store — persists captured baselines as one JSON file each."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path

from pydantic import ValidationError

from qa_html_capture.models.comparison import ComparisonResult
from qa_html_capture.models.snapshot import Baseline

logger = logging.getLogger(__name__)


class BaselineNotFoundError(KeyError):
    """No baseline is stored under the requested id."""


class BaselineReadError(ValueError):
    """A baseline file exists but cannot be parsed."""


class InvalidBaselineIdError(ValueError):
    """The id cannot name a file inside the storage directory."""


class BaselineStore:
    """Manages baseline JSON files under a storage directory."""

    def __init__(self, storage_dir: Path):
        self.storage_dir = Path(storage_dir)

    @staticmethod
    def is_valid_id(baseline_id: str) -> bool:
        return bool(baseline_id) and baseline_id not in (".", "..") and not any(
            sep in baseline_id for sep in ("/", "\\")
        )

    def path_for(self, baseline_id: str) -> Path:
        if not self.is_valid_id(baseline_id):
            raise InvalidBaselineIdError(f"Invalid baseline id: {baseline_id!r}")
        return self.storage_dir / f"{baseline_id}.json"

    def new_baseline_id(self) -> str:
        """Millisecond timestamp id, bumped until no file uses it."""
        candidate = int(time.time() * 1000)
        while self.path_for(str(candidate)).exists():
            candidate += 1
        return str(candidate)

    def save(self, baseline: Baseline) -> Path:
        """Persist a baseline, serializing its element map as a plain object."""
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(baseline.id)
        with open(path, "w") as f:
            json.dump(baseline.model_dump(by_alias=True), f, indent=2)
        logger.info("Stored baseline '%s' (%d elements) at %s", baseline.name, baseline.element_count, path)
        return path

    def load(self, path: Path) -> Baseline:
        """Read one baseline file."""
        try:
            with open(path) as f:
                data = json.load(f)
            return Baseline.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError, UnicodeDecodeError) as e:
            raise BaselineReadError(f"Baseline file {path} is unreadable: {e}") from e

    def get(self, baseline_id: str) -> Baseline:
        if not self.exists(baseline_id):
            raise BaselineNotFoundError(baseline_id)
        return self.load(self.path_for(baseline_id))

    def exists(self, baseline_id: str) -> bool:
        return self.is_valid_id(baseline_id) and self.path_for(baseline_id).exists()

    def list_baselines(self) -> list[Baseline]:
        """All readable baselines, oldest capture first."""
        if not self.storage_dir.exists():
            return []
        baselines = []
        for path in sorted(self.storage_dir.glob("*.json")):
            try:
                baselines.append(self.load(path))
            except BaselineReadError as e:
                logger.warning("Skipping baseline: %s", e)
        return sorted(baselines, key=lambda b: (b.captured_at, b.id))

    def delete(self, baseline_id: str) -> bool:
        if not self.exists(baseline_id):
            return False
        path = self.path_for(baseline_id)
        path.unlink()
        logger.info("Deleted baseline %s", baseline_id)
        return True

    def clear(self) -> int:
        """Delete every baseline file. Returns the number removed."""
        if not self.storage_dir.exists():
            return 0
        removed = 0
        for path in self.storage_dir.glob("*.json"):
            if not path.is_file():
                continue
            path.unlink()
            removed += 1
        logger.info("Cleared %d baselines from %s", removed, self.storage_dir)
        return removed


def save_comparison(result: ComparisonResult, comparisons_dir: Path) -> Path:
    """Persist a comparison result as ``comparison_<ms>.json``."""
    comparisons_dir = Path(comparisons_dir)
    comparisons_dir.mkdir(parents=True, exist_ok=True)
    stamp = int(time.time() * 1000)
    path = comparisons_dir / f"comparison_{stamp}.json"
    while path.exists():
        stamp += 1
        path = comparisons_dir / f"comparison_{stamp}.json"
    with open(path, "w") as f:
        json.dump(result.model_dump(by_alias=True), f, indent=2)
    logger.debug("Saved comparison result to %s", path)
    return path
