"""Configuration models for the capture tool."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

SUPPORTED_PARSERS = ("html.parser", "lxml", "html5lib")


class EnvironmentConfig(BaseModel):
    name: str
    url: str
    is_default: bool = False


class CaptureConfig(BaseModel):
    # Project
    project_name: str = ""
    environments: list[EnvironmentConfig] = Field(default_factory=list)

    # Storage
    storage_dir: str = ".qa-capture"
    save_comparisons: bool = True

    # Parsing
    parser: str = "html.parser"  # BeautifulSoup tree builder

    # Reporting
    report_output_dir: str = "./qa-capture-reports"

    @field_validator("parser")
    @classmethod
    def check_parser(cls, v: str) -> str:
        if v not in SUPPORTED_PARSERS:
            raise ValueError(
                f"Unsupported parser '{v}'. Choose one of: {', '.join(SUPPORTED_PARSERS)}"
            )
        return v

    @property
    def baselines_dir(self) -> Path:
        return Path(self.storage_dir) / "baselines"

    @property
    def comparisons_dir(self) -> Path:
        return Path(self.storage_dir) / "comparisons"

    def default_url(self) -> str:
        """URL of the default environment, falling back to the first one."""
        for env in self.environments:
            if env.is_default:
                return env.url
        return self.environments[0].url if self.environments else ""

    @classmethod
    def load(cls, path: str | Path) -> "CaptureConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)
