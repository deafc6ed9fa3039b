"""
Analysis configuration — the six threshold parameters of the classifier.

Every engine call takes an explicit AnalysisConfig. DEFAULT_PARAMETERS holds
the documented defaults for callers that want them.

YAML shape (either form is accepted):

    analysis:
      target_acos_index: 1.0
      exact_negative_lv: 1.0
      phrase_negative_lv: 5.0
      reliability: 1.0
      increase_bid_lv: 0.7
      decrease_bid_lv: 1.4
"""
from __future__ import annotations

import math
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from .logging_config import setup_logging

logger = setup_logging(__name__)


DEFAULT_PARAMETERS: Mapping[str, float] = MappingProxyType({
    "target_acos_index": 1.0,   # target ACOS = overall ACOS / index
    "exact_negative_lv": 1.0,   # zero-order clicks for exact negative, in "clicks per expected order"
    "phrase_negative_lv": 5.0,  # same, for phrase negative
    "reliability": 1.0,         # min clicks behind a feature-word estimate, same units
    "increase_bid_lv": 0.7,     # below target * lv -> raise bid
    "decrease_bid_lv": 1.4,     # above target * lv -> lower bid
})

# Advisory ranges. Outside them we warn, not fail.
RECOMMENDED_RANGES: Mapping[str, Tuple[float, float]] = MappingProxyType({
    "target_acos_index": (0.2, 2.0),
    "exact_negative_lv": (0.5, 5.0),
    "phrase_negative_lv": (5.0, 50.0),
    "reliability": (0.5, 10.0),
    "increase_bid_lv": (0.3, 1.0),
    "decrease_bid_lv": (1.2, 2.0),
})


class ConfigError(ValueError):
    """Invalid analysis configuration. Raised before any batch is processed."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid analysis config: " + "; ".join(self.errors))


class AnalysisConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    target_acos_index: float = DEFAULT_PARAMETERS["target_acos_index"]
    exact_negative_lv: float = DEFAULT_PARAMETERS["exact_negative_lv"]
    phrase_negative_lv: float = DEFAULT_PARAMETERS["phrase_negative_lv"]
    reliability: float = DEFAULT_PARAMETERS["reliability"]
    increase_bid_lv: float = DEFAULT_PARAMETERS["increase_bid_lv"]
    decrease_bid_lv: float = DEFAULT_PARAMETERS["decrease_bid_lv"]

    @field_validator(
        "target_acos_index",
        "exact_negative_lv",
        "phrase_negative_lv",
        "reliability",
        "increase_bid_lv",
        "decrease_bid_lv",
    )
    @classmethod
    def positive_and_finite(cls, v: float) -> float:
        if math.isnan(v) or math.isinf(v):
            raise ValueError("must be a finite number")
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @model_validator(mode="after")
    def bid_band_is_ordered(self) -> "AnalysisConfig":
        if self.increase_bid_lv >= self.decrease_bid_lv:
            raise ValueError(
                f"increase_bid_lv ({self.increase_bid_lv}) must be below "
                f"decrease_bid_lv ({self.decrease_bid_lv})"
            )
        for name, (low, high) in RECOMMENDED_RANGES.items():
            value = getattr(self, name)
            if not low <= value <= high:
                logger.warning(f"{name}={value} is outside the recommended range {low}-{high}")
        return self

    def as_dict(self) -> Dict[str, float]:
        return self.model_dump()


def parse_analysis_config(data: Mapping[str, Any]) -> AnalysisConfig:
    """Validate a mapping of parameters. Raises ConfigError listing every problem."""
    try:
        return AnalysisConfig.model_validate(dict(data))
    except ValidationError as e:
        errors = []
        for err in e.errors():
            loc = ".".join(str(p) for p in err.get("loc", ())) or "analysis"
            errors.append(f"{loc}: {err.get('msg')}")
        logger.error(f"Config validation failed: {len(errors)} errors")
        for error in errors:
            logger.error(f"  - {error}")
        raise ConfigError(errors) from e


def load_analysis_config(path: str | Path) -> AnalysisConfig:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Analysis config not found: {p}")

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError("Analysis config YAML must be a mapping/object at top level.")

    section = raw.get("analysis", raw)
    if not isinstance(section, dict):
        raise ValueError("Analysis config 'analysis' section must be a mapping.")

    config = parse_analysis_config(section)
    logger.info(f"Loaded analysis config from {p}")
    return config
