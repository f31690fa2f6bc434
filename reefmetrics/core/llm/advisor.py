"""
Parameter Advisor

Produces remediation advice for one water parameter. Values inside the
normal band get a fixed local answer; warning and critical deviations are
explained by the LLM through a strict structured-output schema.

ARCHITECTURE CONSTRAINTS:
- The tier is always computed locally; the LLM never classifies
- Exactly one remote call per warning/critical request, none otherwise
- Advisory failures surface as a single AdvisoryUnavailableError
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, ConfigDict

from reefmetrics.core.status import Tier, TrackedQuantity, classify
from reefmetrics.utils import (
    get_logger,
    AdvisoryError,
    AdvisoryUnavailableError,
    ValidationError,
)
from .openrouter_client import CompletionRequest, ModelParameters, OpenRouterClient

logger = get_logger(__name__)


DISCLAIMER = (
    "These recommendations are AI-generated and should be used as guidance only. "
    "Always research and verify before making changes to your aquarium. "
    "Consult with experienced aquarists or professionals for critical situations."
)

NORMAL_ANALYSIS_TEMPLATE = "Your {full_name} level is within the optimal range for your aquarium."

NORMAL_RECOMMENDATIONS = (
    "Continue regular testing and maintenance to keep parameters stable.",
)

SYSTEM_PROMPT = (
    "You are an expert marine aquarium advisor specializing in water chemistry and reef tank "
    "maintenance. You have deep knowledge of marine biology, coral care, and aquarium parameter "
    "management. Your advice is practical, safe, and based on established aquarium keeping best "
    "practices. You provide clear, actionable guidance that helps aquarists maintain healthy reef "
    "ecosystems."
)

RESPONSE_SCHEMA_NAME = "parameter_recommendation"

ADVISORY_MODEL_PARAMS = ModelParameters(temperature=0.7, max_tokens=1000)


class AdvisoryResult(BaseModel):
    """Shape the LLM must return. Unknown fields are rejected."""
    model_config = ConfigDict(extra="forbid")

    analysis: str
    recommendations: List[str]


class ParameterLookup(Protocol):
    def get_parameter(self, parameter_id: str) -> TrackedQuantity: ...


@dataclass(frozen=True)
class AdvisoryContext:
    """Everything the prompt needs about one deviating parameter."""
    aquarium_type: str
    parameter: TrackedQuantity
    current_value: float
    optimal_min: float
    optimal_max: float
    deviation_pct: float
    tier: Tier

    def __post_init__(self):
        if self.tier not in (Tier.WARNING, Tier.CRITICAL):
            raise ValidationError(
                f"Advisory context requires a warning or critical tier, got {self.tier.value}",
                field="tier",
            )

    @property
    def direction(self) -> str:
        return "below" if self.current_value < self.optimal_min else "above"


def build_user_prompt(context: AdvisoryContext) -> str:
    p = context.parameter
    return (
        f"Analyze the following parameter deviation for a {context.aquarium_type} aquarium:\n"
        f"\n"
        f"Parameter: {p.full_name} ({p.name})\n"
        f"Current Value: {context.current_value:g} {p.unit}\n"
        f"Optimal Range: {context.optimal_min:g}-{context.optimal_max:g} {p.unit}\n"
        f"Deviation: {context.deviation_pct:.1f}% ({context.direction} optimal)\n"
        f"Status: {context.tier.value}\n"
        f"\n"
        f"Provide a brief analysis (2-3 sentences) explaining what this deviation means and why "
        f"it matters for the aquarium ecosystem.\n"
        f"\n"
        f"Then provide 3-5 specific, actionable recommendations to correct this issue. Each "
        f"recommendation should be:\n"
        f"- Practical and safe for the aquarium inhabitants\n"
        f"- Specific to {context.aquarium_type} aquariums\n"
        f"- Actionable (something the user can do)\n"
        f"- Ordered by priority (most important first)\n"
        f"\n"
        f"Focus on immediate actions, testing procedures, and long-term prevention strategies."
    )


@dataclass
class AdvisoryResponse:
    """Advice for one parameter, as returned to the API caller."""
    parameter: TrackedQuantity
    current_value: float
    optimal_min: float
    optimal_max: float
    deviation_pct: float
    tier: Tier
    analysis: str
    recommendations: List[str] = field(default_factory=list)
    disclaimer: str = DISCLAIMER
    is_fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quantity": self.parameter.to_dict(),
            "currentValue": self.current_value,
            "optimalRange": {"min": self.optimal_min, "max": self.optimal_max},
            "deviationPct": self.deviation_pct,
            "tier": self.tier.value,
            "analysis": self.analysis,
            "recommendations": list(self.recommendations),
            "disclaimer": self.disclaimer,
        }


class ParameterAdvisor:
    """
    Combines local classification with LLM remediation advice.

    NON-DECISIONAL: the LLM explains a deviation that has already been
    classified; it never decides the tier.
    """

    def __init__(
        self,
        client: OpenRouterClient,
        parameters: ParameterLookup,
        model: Optional[str] = None,
    ):
        """
        Args:
            client: Advisory client (or any object with an async ``complete``)
            parameters: Source used to resolve parameter ids
            model: Optional model override; the client default otherwise
        """
        self.client = client
        self.parameters = parameters
        self.model = model

    async def advise(
        self,
        parameter_id: str,
        current_value: Optional[float],
        optimal_min: float,
        optimal_max: float,
        aquarium_type: str = "marine",
    ) -> AdvisoryResponse:
        """
        Build advice for one parameter reading.

        Raises:
            NotFoundError: unknown parameter id
            ValidationError: no value supplied (no_data is filtered by callers)
            AdvisoryUnavailableError: the remote advisory call failed
        """
        parameter = self.parameters.get_parameter(parameter_id)

        if current_value is None:
            raise ValidationError("A current value is required for recommendations", field="current_value")

        status = classify(current_value, optimal_min, optimal_max)

        if status.tier == Tier.NORMAL:
            logger.info(f"ParameterAdvisor [{parameter.name}]: within range, local fallback")
            return AdvisoryResponse(
                parameter=parameter,
                current_value=current_value,
                optimal_min=optimal_min,
                optimal_max=optimal_max,
                deviation_pct=status.deviation_pct,
                tier=status.tier,
                analysis=NORMAL_ANALYSIS_TEMPLATE.format(full_name=parameter.full_name),
                recommendations=list(NORMAL_RECOMMENDATIONS),
                is_fallback=True,
            )

        context = AdvisoryContext(
            aquarium_type=aquarium_type,
            parameter=parameter,
            current_value=current_value,
            optimal_min=optimal_min,
            optimal_max=optimal_max,
            deviation_pct=status.deviation_pct,
            tier=status.tier,
        )
        result = await self._request_advice(context)

        return AdvisoryResponse(
            parameter=parameter,
            current_value=current_value,
            optimal_min=optimal_min,
            optimal_max=optimal_max,
            deviation_pct=status.deviation_pct,
            tier=status.tier,
            analysis=result.analysis,
            recommendations=list(result.recommendations),
        )

    async def _request_advice(self, context: AdvisoryContext) -> AdvisoryResult:
        request = CompletionRequest(
            system_prompt=SYSTEM_PROMPT,
            user_prompt=build_user_prompt(context),
            response_model=AdvisoryResult,
            schema_name=RESPONSE_SCHEMA_NAME,
            model=self.model,
            model_params=ADVISORY_MODEL_PARAMS,
        )
        try:
            result = await self.client.complete(request)
        except AdvisoryError as e:
            logger.warning(
                f"ParameterAdvisor [{context.parameter.name}]: advisory call failed "
                f"[{e.kind.value}, retryable={e.retryable}] {e.message}"
            )
            raise AdvisoryUnavailableError(cause_kind=e.kind) from e

        logger.info(
            f"ParameterAdvisor [{context.parameter.name}]: {context.tier.value} advice with "
            f"{len(result.recommendations)} recommendation(s)"
        )
        return result
