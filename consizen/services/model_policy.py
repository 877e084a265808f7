"""Static model-selection policy for upstream Gemini calls."""

TASK_MODELS: dict[str, str] = {
    "sustainability_analysis": "gemini-1.5-pro",
    "spending_analysis": "gemini-1.5-pro",
    "merchant_analysis": "gemini-1.5-flash",
    "carbon_footprint": "gemini-1.5-flash",
    "recommendations": "gemini-1.5-flash",
    "challenges": "gemini-1.5-flash",
}

COMPLEXITY_MODELS: dict[str, str] = {
    "low": "gemini-1.5-flash",
    "medium": "gemini-1.5-flash",
    "high": "gemini-1.5-pro",
}

DEFAULT_TASK = "general"
DEFAULT_COMPLEXITY = "medium"
FALLBACK_MODEL = "gemini-2.0-flash"


def resolve_model(task: str | None = None, model_complexity: str | None = None) -> str:
    """Pick the primary model: task rule, then complexity rule, then medium."""
    if task and task in TASK_MODELS:
        return TASK_MODELS[task]

    if model_complexity and model_complexity in COMPLEXITY_MODELS:
        return COMPLEXITY_MODELS[model_complexity]

    return COMPLEXITY_MODELS[DEFAULT_COMPLEXITY]


def candidate_models(
    task: str | None = None,
    model_complexity: str | None = None,
) -> list[str]:
    """Ordered models to attempt: the policy model, then the fallback."""
    primary = resolve_model(task, model_complexity)
    if primary == FALLBACK_MODEL:
        return [primary]
    return [primary, FALLBACK_MODEL]
