"""Token and cost tracking for model calls."""

from clarity.core.logging import get_logger
from clarity.db.supabase_client import get_supabase

logger = get_logger(__name__)

# Pricing per 1M tokens: (input, output)
MODEL_PRICING: dict[str, tuple[float, float]] = {
    "claude-opus-4-5-20251101": (15.0, 75.0),
    "claude-sonnet-4-5-20250929": (3.0, 15.0),
    "claude-sonnet-4-20250514": (3.0, 15.0),
    "claude-haiku-4-5-20251001": (0.80, 4.0),
    "claude-3-5-haiku-20241022": (0.80, 4.0),
}


def estimate_cost(model: str, tokens_input: int, tokens_output: int) -> float:
    """Estimated USD cost of one call; 0.0 for unknown models."""
    pricing = MODEL_PRICING.get(model)
    if not pricing:
        # Dated variants share the family price
        for key, val in MODEL_PRICING.items():
            if model.startswith(key.rsplit("-", 1)[0]):
                pricing = val
                break
    if not pricing:
        logger.warning(f"No pricing found for model '{model}', using $0")
        return 0.0

    input_rate, output_rate = pricing
    cost = (tokens_input * input_rate + tokens_output * output_rate) / 1_000_000
    return round(cost, 6)


def record_llm_usage(
    workflow: str,
    model: str,
    tokens_input: int,
    tokens_output: int,
    duration_ms: int = 0,
    company_id: str | None = None,
) -> None:
    """Insert a usage row into ``llm_usage``. Never raises."""
    try:
        estimated_cost = estimate_cost(model, tokens_input, tokens_output)

        row = {
            "workflow": workflow,
            "model": model,
            "provider": "anthropic",
            "tokens_input": tokens_input,
            "tokens_output": tokens_output,
            "estimated_cost_usd": estimated_cost,
            "duration_ms": duration_ms,
        }
        if company_id:
            row["company_id"] = company_id

        get_supabase().table("llm_usage").insert(row).execute()

        logger.debug(
            f"LLM usage logged: {workflow} model={model} "
            f"tokens={tokens_input}+{tokens_output} cost=${estimated_cost:.4f}"
        )
    except Exception as e:
        logger.error(f"Failed to log LLM usage: {e}")
