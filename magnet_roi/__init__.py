"""
Magnet ROI: projects the return of a physical magnet pilot on a
subscription business.

Provides the allocation policy, pilot sizing, monthly cashflow simulation,
adaptive horizon reporting and supporting scenario tools.
"""

from .errors import RoiError, InvalidInputError, InvalidConfigError
from .models import (
    PlanChoice,
    PricingModel,
    ProvidedRate,
    UseDefault,
    RoiInputs,
    Allocation,
    MonthlyFlow,
    GrowthSummary,
    RetentionSummary,
    TotalSummary,
    RoiResult,
    monthly_equivalent_price,
)
from .config import (
    RoiConfig,
    ClosedFormConfig,
    SizingPolicy,
    EngineSettings,
    DEFAULT_CONFIG,
    DEFAULT_CLOSED_FORM_CONFIG,
    DEFAULT_SIZING,
    load_settings,
    load_roi_config,
)
from .engine import (
    allocate,
    recommend_size,
    simulate,
    aggregate_horizon,
    allocate_and_simulate,
    evaluate_with_adaptive_horizon,
    estimate_closed_form,
)
from .roi_analysis import RoiAnalysisRequest, RoiAnalysis, RoiAnalyzer, analyze_pilot

__version__ = "1.0.0"

__all__ = [
    # errors.py
    "RoiError",
    "InvalidInputError",
    "InvalidConfigError",
    # models.py
    "PlanChoice",
    "PricingModel",
    "ProvidedRate",
    "UseDefault",
    "RoiInputs",
    "Allocation",
    "MonthlyFlow",
    "GrowthSummary",
    "RetentionSummary",
    "TotalSummary",
    "RoiResult",
    "monthly_equivalent_price",
    # config.py
    "RoiConfig",
    "ClosedFormConfig",
    "SizingPolicy",
    "EngineSettings",
    "DEFAULT_CONFIG",
    "DEFAULT_CLOSED_FORM_CONFIG",
    "DEFAULT_SIZING",
    "load_settings",
    "load_roi_config",
    # engine
    "allocate",
    "recommend_size",
    "simulate",
    "aggregate_horizon",
    "allocate_and_simulate",
    "evaluate_with_adaptive_horizon",
    "estimate_closed_form",
    # roi_analysis.py
    "RoiAnalysisRequest",
    "RoiAnalysis",
    "RoiAnalyzer",
    "analyze_pilot",
]
