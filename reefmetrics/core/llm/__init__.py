"""
LLM Advisory Module

Uses OpenRouter structured outputs to explain already-classified parameter
deviations and suggest corrective actions.

ARCHITECTURE CONSTRAINTS:
- LLM receives: parameter identity, value, optimal range, deviation, tier
- LLM DOES NOT see: measurement history, other aquariums, user data
- LLM outputs: analysis text and an ordered list of recommendations
- LLM DOES NOT output: tiers, deviations or any value shown on the dashboard
"""
from .openrouter_client import (
    OpenRouterClient,
    OpenRouterConfig,
    ModelParameters,
    CompletionRequest,
)
from .advisor import (
    ParameterAdvisor,
    AdvisoryContext,
    AdvisoryResult,
    AdvisoryResponse,
    DISCLAIMER,
    NORMAL_ANALYSIS_TEMPLATE,
    NORMAL_RECOMMENDATIONS,
    SYSTEM_PROMPT,
)

__all__ = [
    "OpenRouterClient",
    "OpenRouterConfig",
    "ModelParameters",
    "CompletionRequest",
    "ParameterAdvisor",
    "AdvisoryContext",
    "AdvisoryResult",
    "AdvisoryResponse",
    "DISCLAIMER",
    "NORMAL_ANALYSIS_TEMPLATE",
    "NORMAL_RECOMMENDATIONS",
    "SYSTEM_PROMPT",
]
