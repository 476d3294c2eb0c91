"""Configuration management for the magnet ROI engine."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

import yaml

from .errors import InvalidConfigError
from .validation import require_count, require_range

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV_VAR = "MAGNET_ROI_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "roi_config.yaml"

# Escalation ladder used by the adaptive horizon policy
SHORT_HORIZON_MONTHS = 12
MEDIUM_HORIZON_MONTHS = 24
LONG_HORIZON_MONTHS = 36


@dataclass(frozen=True)
class RoiConfig:
    """Tunable constants for the monthly simulation engine."""
    gross_margin_fraction: float = 0.8
    platform_revenue_share_fraction: float = 0.10
    cost_per_unit_usd: float = 10.0
    conversion_uplift_alpha: float = 0.5
    churn_reduction_beta: float = 0.3
    paid_allocation_fraction: float = 0.15
    effect_decay_tau_months: float = 6.0
    horizon_months: int = SHORT_HORIZON_MONTHS
    default_baseline_conversion_rate: float = 0.03
    # Simulated months; longer than the horizon so payback can land after it
    simulation_months: int = 60
    min_paid_units: int = 0

    def __post_init__(self):
        err = InvalidConfigError
        require_range("gross_margin_fraction", self.gross_margin_fraction, err, 0.0, 1.0, low_inclusive=False)
        require_range(
            "platform_revenue_share_fraction", self.platform_revenue_share_fraction, err,
            0.0, 1.0, high_inclusive=False,
        )
        require_range("cost_per_unit_usd", self.cost_per_unit_usd, err, 0.0, math.inf, low_inclusive=False)
        require_range("conversion_uplift_alpha", self.conversion_uplift_alpha, err, 0.0, math.inf)
        require_range("churn_reduction_beta", self.churn_reduction_beta, err, 0.0, 1.0, high_inclusive=False)
        require_range("paid_allocation_fraction", self.paid_allocation_fraction, err, 0.0, 1.0)
        require_range(
            "effect_decay_tau_months", self.effect_decay_tau_months, err,
            0.0, math.inf, low_inclusive=False,
        )
        require_count("horizon_months", self.horizon_months, err, minimum=1)
        require_range(
            "default_baseline_conversion_rate", self.default_baseline_conversion_rate, err,
            0.0, 1.0, high_inclusive=False,
        )
        require_count("simulation_months", self.simulation_months, err, minimum=1)
        require_count("min_paid_units", self.min_paid_units, err)

        if self.simulation_months < LONG_HORIZON_MONTHS:
            raise err(
                f"simulation_months must be >= {LONG_HORIZON_MONTHS} to cover every "
                f"reporting horizon, got {self.simulation_months}"
            )
        if self.horizon_months > self.simulation_months:
            raise err(
                f"horizon_months ({self.horizon_months}) cannot exceed "
                f"simulation_months ({self.simulation_months})"
            )

    @property
    def profit_fraction(self) -> float:
        """Share of subscription revenue kept as profit by the creator."""
        return (1.0 - self.platform_revenue_share_fraction) * self.gross_margin_fraction


@dataclass(frozen=True)
class ClosedFormConfig:
    """Constants for the closed-form quick estimate."""
    gross_margin_fraction: float = 0.8
    platform_revenue_share_fraction: float = 0.10
    cost_per_unit_usd: float = 20.0
    conversion_rate_growth: float = 0.10  # delta_c
    churn_improvement: float = 0.08  # u
    retention_coverage: float = 0.5  # share of paid recipients who adopt the habit
    horizon_months: int = SHORT_HORIZON_MONTHS
    paid_allocation_fraction: float = 0.15
    min_paid_units: int = 200

    def __post_init__(self):
        err = InvalidConfigError
        require_range("gross_margin_fraction", self.gross_margin_fraction, err, 0.0, 1.0, low_inclusive=False)
        require_range(
            "platform_revenue_share_fraction", self.platform_revenue_share_fraction, err,
            0.0, 1.0, high_inclusive=False,
        )
        require_range("cost_per_unit_usd", self.cost_per_unit_usd, err, 0.0, math.inf, low_inclusive=False)
        require_range("conversion_rate_growth", self.conversion_rate_growth, err, 0.0, 1.0)
        require_range("churn_improvement", self.churn_improvement, err, 0.0, 1.0, high_inclusive=False)
        require_range("retention_coverage", self.retention_coverage, err, 0.0, 1.0)
        require_count("horizon_months", self.horizon_months, err, minimum=1)
        require_range("paid_allocation_fraction", self.paid_allocation_fraction, err, 0.0, 1.0)
        require_count("min_paid_units", self.min_paid_units, err)

    @property
    def profit_fraction(self) -> float:
        return (1.0 - self.platform_revenue_share_fraction) * self.gross_margin_fraction


@dataclass(frozen=True)
class SizingPolicy:
    """
    Constants for the pilot size recommendation.

    ``reference_unit_cost_usd`` is deliberately separate from the configured
    unit cost so the recommended bands stay put when pricing changes.
    """
    budget_fraction_of_mrr: float = 0.10
    reference_unit_cost_usd: float = 10.0
    min_units: int = 1500
    max_units: int = 3000

    def __post_init__(self):
        err = InvalidConfigError
        require_range("budget_fraction_of_mrr", self.budget_fraction_of_mrr, err, 0.0, math.inf)
        require_range(
            "reference_unit_cost_usd", self.reference_unit_cost_usd, err,
            0.0, math.inf, low_inclusive=False,
        )
        require_count("min_units", self.min_units, err)
        require_count("max_units", self.max_units, err)
        if self.min_units > self.max_units:
            raise err(f"min_units ({self.min_units}) cannot exceed max_units ({self.max_units})")


@dataclass(frozen=True)
class EngineSettings:
    """All engine configuration sections loaded together."""
    roi: RoiConfig = field(default_factory=RoiConfig)
    closed_form: ClosedFormConfig = field(default_factory=ClosedFormConfig)
    sizing: SizingPolicy = field(default_factory=SizingPolicy)


DEFAULT_CONFIG = RoiConfig()
DEFAULT_CLOSED_FORM_CONFIG = ClosedFormConfig()
DEFAULT_SIZING = SizingPolicy()

_T = TypeVar("_T")


def _build_section(cls: Type[_T], section: str, data: Any) -> _T:
    """Instantiate one config dataclass from a YAML mapping."""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise InvalidConfigError(f"'{section}' section must be a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise InvalidConfigError(f"Unknown keys in '{section}' section: {', '.join(unknown)}")

    return cls(**data)


def resolve_config_path(config_path: Optional[Path] = None) -> Path:
    """Pick the config file: explicit path, then environment, then project default."""
    if config_path is not None:
        return Path(config_path)
    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def load_settings(config_path: Optional[Path] = None) -> EngineSettings:
    """Load every engine configuration section from a YAML file."""
    path = resolve_config_path(config_path)

    if not path.exists():
        logger.info("No ROI config at %s, using defaults", path)
        return EngineSettings()

    with path.open() as f:
        data: Dict[str, Any] = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise InvalidConfigError(f"ROI config {path} must be a mapping at the top level")

    unknown = sorted(set(data) - {"roi", "closed_form", "sizing"})
    if unknown:
        raise InvalidConfigError(f"Unknown sections in {path}: {', '.join(unknown)}")

    logger.debug("Loaded ROI config from %s", path)
    return EngineSettings(
        roi=_build_section(RoiConfig, "roi", data.get("roi")),
        closed_form=_build_section(ClosedFormConfig, "closed_form", data.get("closed_form")),
        sizing=_build_section(SizingPolicy, "sizing", data.get("sizing")),
    )


def load_roi_config(config_path: Optional[Path] = None) -> RoiConfig:
    """Load only the simulation engine constants."""
    return load_settings(config_path).roi
