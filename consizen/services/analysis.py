"""Structured sustainability analyses built on the generation proxy."""

import hashlib
import json
import logging
import re
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from consizen.schemas import (
    CarbonFootprint,
    MerchantData,
    SpendingPattern,
    SustainabilityScore,
    Transaction,
)
from consizen.services import prompts
from consizen.services.proxy import AllModelsFailedError, GenerationProxy

logger = logging.getLogger(__name__)

JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")
JSON_ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")

RECOMMENDATION_HISTORY_LIMIT = 5
SPENDING_HISTORY_LIMIT = 10

DEFAULT_RECOMMENDATIONS = [
    "Consider shopping at local farmers markets",
    "Look for products with eco-certifications",
    "Use public transportation when possible",
    "Support businesses with sustainable practices",
    "Join community sustainability challenges",
]

DEFAULT_CHALLENGES = [
    "30-Day Local Business Challenge",
    "Zero-Waste Shopping Challenge",
    "Carbon-Neutral Week Challenge",
    "Sustainable Food Challenge",
    "Green Transportation Challenge",
]

_string_list = TypeAdapter(list[str])

T = TypeVar("T")


class AnalysisParseError(ValueError):
    """Raised when model output does not contain the expected JSON."""


def extract_json(text: str, pattern: re.Pattern = JSON_OBJECT_PATTERN) -> Any:
    """Pull the outermost JSON object (or array) out of free-form model text."""
    match = pattern.search(text)
    if not match:
        raise AnalysisParseError("Invalid response format")
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise AnalysisParseError(f"Invalid JSON in response: {e}") from e


class SustainabilityAnalyst:
    """Merchant, footprint and spending analyses with neutral fallbacks."""

    def __init__(self, proxy: GenerationProxy):
        self.proxy = proxy

    async def _generate_json(
        self,
        prompt: str,
        task: str,
        pattern: re.Pattern,
        validate: Callable[[Any], T],
    ) -> T:
        # Analysis prompts share long fixed preambles, so key on the whole text.
        key_source = hashlib.sha256(prompt.encode()).hexdigest()
        text = await self.proxy.handle_generate(prompt, task=task, cache_key_source=key_source)
        try:
            return validate(extract_json(text, pattern))
        except (AnalysisParseError, ValidationError):
            self.proxy.forget(prompt, task=task, cache_key_source=key_source)
            raise

    async def analyze_merchant(self, merchant: MerchantData) -> SustainabilityScore:
        prompt = prompts.merchant_prompt(
            name=merchant.name,
            category=merchant.category,
            description=merchant.description,
            location=merchant.location,
            certifications=merchant.certifications,
        )
        try:
            return await self._generate_json(
                prompt,
                "merchant_analysis",
                JSON_OBJECT_PATTERN,
                SustainabilityScore.model_validate,
            )
        except (AllModelsFailedError, AnalysisParseError, ValidationError) as e:
            logger.warning(f"Error analyzing merchant {merchant.name}: {e}")
            return SustainabilityScore(
                score=50,
                reasoning="Unable to analyze merchant at this time",
                category="neutral",
                recommendations=["Consider researching the merchant's sustainability practices"],
                carbonIntensity="medium",
            )

    async def calculate_carbon_footprint(
        self,
        amount: float,
        merchant: MerchantData,
        category: str,
    ) -> CarbonFootprint:
        prompt = prompts.carbon_footprint_prompt(amount, merchant.name, category)
        try:
            return await self._generate_json(
                prompt, "carbon_footprint", JSON_OBJECT_PATTERN, CarbonFootprint.model_validate
            )
        except (AllModelsFailedError, AnalysisParseError, ValidationError) as e:
            logger.warning(f"Error calculating carbon footprint: {e}")
            return CarbonFootprint(
                co2Kg=amount * 0.001,
                category=category,
                offsetCost=amount * 0.01,
                impact="low",
            )

    async def get_recommendations(
        self,
        preferences: list[str],
        spending_history: list[Transaction],
    ) -> list[str]:
        history = [
            t.model_dump(exclude_none=True)
            for t in spending_history[-RECOMMENDATION_HISTORY_LIMIT:]
        ]
        prompt = prompts.recommendations_prompt(preferences, history)
        try:
            return await self._generate_json(
                prompt, "recommendations", JSON_ARRAY_PATTERN, _string_list.validate_python
            )
        except (AllModelsFailedError, AnalysisParseError, ValidationError) as e:
            logger.warning(f"Error getting recommendations: {e}")
            return list(DEFAULT_RECOMMENDATIONS)

    async def generate_challenges(self) -> list[str]:
        try:
            return await self._generate_json(
                prompts.CHALLENGES_PROMPT,
                "challenges",
                JSON_ARRAY_PATTERN,
                _string_list.validate_python,
            )
        except (AllModelsFailedError, AnalysisParseError, ValidationError) as e:
            logger.warning(f"Error generating challenges: {e}")
            return list(DEFAULT_CHALLENGES)

    async def analyze_spending_patterns(
        self,
        transactions: list[Transaction],
    ) -> SpendingPattern:
        recent = [
            t.model_dump(exclude_none=True)
            for t in transactions[-SPENDING_HISTORY_LIMIT:]
        ]
        prompt = prompts.spending_patterns_prompt(recent)
        try:
            return await self._generate_json(
                prompt, "spending_analysis", JSON_OBJECT_PATTERN, SpendingPattern.model_validate
            )
        except (AllModelsFailedError, AnalysisParseError, ValidationError) as e:
            logger.warning(f"Error analyzing spending patterns: {e}")
            return SpendingPattern(
                sustainabilityTrend="stable",
                topCategories=["general"],
                ecoScore=50,
                suggestions=["Start tracking your sustainability impact"],
                impact="Moderate environmental impact",
            )
