from __future__ import annotations

import logging
from pathlib import Path

import orjson
import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from webshot.comparison.types import (
    DEFAULT_THRESHOLD,
    RGB,
    ComparisonAlgorithm,
    ComparisonOptions,
)
from webshot.errors import ConfigurationError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}
JSON_SUFFIXES = {".json"}


def parse_rgb_color(value: str) -> RGB:
    parts = value.split(",")
    if len(parts) != 3:
        raise ConfigurationError(
            f"Invalid color format: {value}. Expected format: R,G,B (e.g., 255,0,0)"
        )
    channels: list[int] = []
    for label, part in zip(("red", "green", "blue"), parts):
        try:
            channel = int(part.strip())
        except ValueError:
            raise ConfigurationError(f"Invalid {label} value: {part}") from None
        if not 0 <= channel <= 255:
            raise ConfigurationError(f"Invalid {label} value: {part}")
        channels.append(channel)
    return channels[0], channels[1], channels[2]


class ComparisonConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    algorithm: str = ComparisonAlgorithm.PIXEL_DIFF.value
    threshold: float = DEFAULT_THRESHOLD
    generate_diff: bool = False
    diff_output_path: Path | None = None
    ignore_antialiasing: bool = False
    diff_color: str = "255,0,0"

    def to_options(self, base_dir: Path | None = None) -> ComparisonOptions:
        diff_output_path = self.diff_output_path
        if diff_output_path is not None and base_dir is not None:
            diff_output_path = base_dir / diff_output_path
        options = ComparisonOptions(
            algorithm=ComparisonAlgorithm.parse(self.algorithm),
            threshold=self.threshold,
            generate_diff_image=self.generate_diff,
            diff_output_path=diff_output_path,
            ignore_antialiasing=self.ignore_antialiasing,
            diff_color=parse_rgb_color(self.diff_color),
        )
        options.validate()
        return options


class ComparisonJob(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    baseline: Path
    actual: Path
    comparison: ComparisonConfig | None = None


class ComparisonPlan(BaseModel):
    """A set of baseline/actual image pairs sharing default comparison settings.

    Relative paths inside a plan file are resolved against the file's
    directory by :func:`load_plan`.
    """

    model_config = ConfigDict(extra="forbid")

    defaults: ComparisonConfig = ComparisonConfig()
    comparisons: list[ComparisonJob] = []
    base_dir: Path | None = None

    def effective_config(self, job: ComparisonJob) -> ComparisonConfig:
        return job.comparison if job.comparison is not None else self.defaults

    def resolve(self, path: Path) -> Path:
        if path.is_absolute() or self.base_dir is None:
            return path
        return self.base_dir / path


def _read_document(path: Path) -> object:
    suffix = path.suffix.lower()
    if suffix not in YAML_SUFFIXES | JSON_SUFFIXES:
        raise ConfigurationError(
            f"Unsupported configuration file extension: {path.suffix or '<none>'}"
        )
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e

    try:
        if suffix in JSON_SUFFIXES:
            return orjson.loads(raw)
        return yaml.safe_load(raw)
    except (orjson.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot parse configuration file {path}: {e}") from e


def load_comparison_config(path: str | Path) -> ComparisonConfig:
    path = Path(path)
    data = _read_document(path) or {}
    try:
        return ComparisonConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid comparison config {path}: {e}") from e


def load_plan(path: str | Path) -> ComparisonPlan:
    path = Path(path)
    data = _read_document(path) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid comparison plan {path}: expected a mapping")
    try:
        plan = ComparisonPlan.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid comparison plan {path}: {e}") from e

    if plan.base_dir is None:
        plan = plan.model_copy(update={"base_dir": path.parent})
    logger.info(
        "Loaded comparison plan",
        extra={"plan": str(path), "comparisons": len(plan.comparisons)},
    )
    return plan
