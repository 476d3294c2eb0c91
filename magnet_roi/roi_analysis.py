"""
Unified facade for pilot ROI analysis.

Turns questionnaire answers into engine inputs, sizes the pilot when no size
was given, evaluates it with the adaptive horizon policy, and attaches the
closed-form estimate and the rollout timeline.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import EngineSettings, load_settings
from .engine import (
    ClosedFormResult,
    estimate_closed_form,
    evaluate_with_adaptive_horizon,
    recommend_size,
)
from .models import (
    PlanChoice,
    PricingModel,
    RoiInputs,
    RoiResult,
    monthly_equivalent_price,
)
from .reporting import summarize
from .timeline import DEFAULT_ROLLOUT_STEPS, RolloutMilestone, build_rollout_timeline

logger = logging.getLogger(__name__)

PLAN_NAMES = {
    PlanChoice.GROWTH_ONLY: "Plan A - Growth Only",
    PlanChoice.GROWTH_AND_RETENTION: "Plan B - Growth + Retention",
}


@dataclass
class RoiAnalysisRequest:
    """Questionnaire answers for one analysis."""

    total_subscribers: int
    paid_subscribers: int
    subscription_price_usd: float
    avg_paid_lifetime_months: float
    plan_choice: PlanChoice = PlanChoice.GROWTH_ONLY

    # Fields with defaults must come last
    pricing_model: PricingModel = PricingModel.MONTHLY
    baseline_conversion_rate: Optional[float] = None
    total_units: Optional[int] = None  # Recommended size is used when omitted
    start_date: Optional[date] = None  # Rollout kickoff, defaults to today


@dataclass(frozen=True)
class RoiAnalysis:
    """Everything a presentation or document layer needs for one analysis."""

    inputs: RoiInputs
    plan_name: str
    recommended_units: int
    result: RoiResult
    closed_form: ClosedFormResult
    timeline: List[RolloutMilestone] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Rounded, JSON-friendly view for rendering and email documents."""
        return {
            "plan_name": self.plan_name,
            "plan_choice": self.inputs.plan_choice.value,
            "total_units": self.inputs.total_units,
            "recommended_units": self.recommended_units,
            "summary": summarize(self.result),
            "timeline": [
                {"name": m.name, "date": m.date.isoformat(), "label": m.label}
                for m in self.timeline
            ],
        }


class RoiAnalyzer:
    """Runs pilot analyses against one configuration snapshot."""

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        rollout_steps=DEFAULT_ROLLOUT_STEPS,
    ):
        self.settings = settings or EngineSettings()
        self.rollout_steps = tuple(rollout_steps)

    @classmethod
    def from_config_file(cls, config_path: Optional[Path] = None) -> "RoiAnalyzer":
        """Create an analyzer from the YAML configuration."""
        return cls(settings=load_settings(config_path))

    def build_inputs(self, request: RoiAnalysisRequest) -> RoiInputs:
        """Convert questionnaire answers into validated engine inputs."""
        price = monthly_equivalent_price(request.subscription_price_usd, request.pricing_model)

        # Sized before the unit count is known
        sizing_inputs = RoiInputs.from_subscriber_totals(
            total_units=0,
            total_subscribers=request.total_subscribers,
            paid_subscribers=request.paid_subscribers,
            monthly_revenue_per_paid_user=price,
            avg_paid_lifetime_months=request.avg_paid_lifetime_months,
            plan_choice=request.plan_choice,
            baseline_conversion_rate=request.baseline_conversion_rate,
        )
        if request.total_units is not None:
            total_units = request.total_units
        else:
            total_units = recommend_size(sizing_inputs, self.settings.sizing)
            logger.info("No pilot size given, using recommended %d units", total_units)

        return RoiInputs(
            total_units=total_units,
            paid_subscribers=sizing_inputs.paid_subscribers,
            free_subscribers=sizing_inputs.free_subscribers,
            monthly_revenue_per_paid_user=price,
            avg_paid_lifetime_months=sizing_inputs.avg_paid_lifetime_months,
            plan_choice=request.plan_choice,
            baseline_conversion=sizing_inputs.baseline_conversion,
        )

    def analyze(self, request: RoiAnalysisRequest) -> RoiAnalysis:
        """
        Run a complete pilot analysis.

        Args:
            request: Questionnaire answers

        Returns:
            RoiAnalysis with the adaptive-horizon result and supporting views
        """
        inputs = self.build_inputs(request)
        recommended = recommend_size(inputs, self.settings.sizing)

        result = evaluate_with_adaptive_horizon(inputs, self.settings.roi)
        closed_form = estimate_closed_form(inputs, self.settings.closed_form)

        start = request.start_date or date.today()
        timeline = build_rollout_timeline(start, self.rollout_steps)

        logger.debug(
            "Analyzed %s pilot: %d units, net gain %.2f over %d months",
            inputs.plan_choice.value, inputs.total_units,
            result.total.net_gain_in_horizon, result.horizon_months,
        )

        return RoiAnalysis(
            inputs=inputs,
            plan_name=PLAN_NAMES[inputs.plan_choice],
            recommended_units=recommended,
            result=result,
            closed_form=closed_form,
            timeline=timeline,
        )


def analyze_pilot(
    total_subscribers: int,
    paid_subscribers: int,
    subscription_price_usd: float,
    avg_paid_lifetime_months: float,
    plan_choice: PlanChoice = PlanChoice.GROWTH_ONLY,
    total_units: Optional[int] = None,
    settings: Optional[EngineSettings] = None,
) -> RoiAnalysis:
    """
    Convenience function to analyze a pilot with monthly pricing.

    Args:
        total_subscribers: All subscribers, free and paid
        paid_subscribers: Paying subscribers
        subscription_price_usd: Monthly price per paid subscriber
        avg_paid_lifetime_months: Average paid tenure
        plan_choice: Growth only, or growth and retention
        total_units: Pilot size, recommended when omitted
        settings: Engine configuration, defaults when omitted

    Returns:
        Complete pilot analysis
    """
    request = RoiAnalysisRequest(
        total_subscribers=total_subscribers,
        paid_subscribers=paid_subscribers,
        subscription_price_usd=subscription_price_usd,
        avg_paid_lifetime_months=avg_paid_lifetime_months,
        plan_choice=plan_choice,
        total_units=total_units,
    )
    return RoiAnalyzer(settings=settings).analyze(request)
