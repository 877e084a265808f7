"""Prompt templates for ConsizeN sustainability analyses."""

import json

from consizen.services.model_policy import DEFAULT_TASK

SUSTAINABILITY_TASK = "sustainability_analysis"

# The dashboard posts bare transaction strings with no task.
WRAPPED_TASKS = {SUSTAINABILITY_TASK, DEFAULT_TASK}

SUSTAINABILITY_TEMPLATE = """\
As an AI sustainability agent for ConsizeN, analyze the following transaction or merchant data and provide:
1. A sustainability score (0-100)
2. Environmental impact assessment
3. Specific recommendations for more eco-friendly alternatives
4. Carbon offset suggestion

Think step-by-step about how this merchant or transaction impacts the environment.

Transaction/Merchant: {prompt}
"""

MERCHANT_TEMPLATE = """\
Analyze the sustainability of this merchant and provide a detailed assessment:

Merchant: {name}
Category: {category}
Description: {description}
Location: {location}
Certifications: {certifications}

Please provide a JSON response with the following structure:
{{
  "score": number (1-100),
  "reasoning": "detailed explanation",
  "category": "eco-friendly" | "neutral" | "harmful",
  "recommendations": ["array of improvement suggestions"],
  "carbonIntensity": "low" | "medium" | "high"
}}

Consider factors like:
- Environmental impact
- Social responsibility
- Sustainable practices
- Carbon footprint
- Certifications and standards
"""

CARBON_FOOTPRINT_TEMPLATE = """\
Calculate the carbon footprint for this transaction:

Amount: ${amount}
Merchant: {merchant}
Category: {category}

Please provide a JSON response with the following structure:
{{
  "co2Kg": number (estimated CO2 in kg),
  "category": "transaction category",
  "offsetCost": number (cost to offset in USD),
  "impact": "low" | "medium" | "high"
}}

Consider:
- Transaction amount
- Merchant type and practices
- Industry averages
- Environmental impact factors
"""

RECOMMENDATIONS_TEMPLATE = """\
Based on the user's preferences and spending history, provide sustainability recommendations:

User Preferences: {preferences}
Spending History: {history}

Provide 5 actionable recommendations as a JSON array of strings.
Focus on:
- Eco-friendly alternatives
- Sustainable spending habits
- Carbon reduction strategies
- Community impact opportunities
"""

CHALLENGES_PROMPT = """\
Generate 5 creative sustainability challenges for a community of conscious consumers:

Challenges should be:
- Achievable within a month
- Measurable and trackable
- Engaging and fun
- Focused on spending habits
- Community-oriented

Provide as a JSON array of challenge descriptions.
"""

SPENDING_PATTERNS_TEMPLATE = """\
Analyze these spending patterns for sustainability insights:

Transactions: {transactions}

Provide a JSON response with:
{{
  "sustainabilityTrend": "improving" | "declining" | "stable",
  "topCategories": ["array of spending categories"],
  "ecoScore": number (1-100),
  "suggestions": ["array of improvement suggestions"],
  "impact": "summary of environmental impact"
}}
"""


def build_upstream_prompt(prompt: str, task: str) -> str:
    """Shape the caller's prompt for the upstream model."""
    if task in WRAPPED_TASKS:
        return SUSTAINABILITY_TEMPLATE.format(prompt=prompt)
    return prompt


def merchant_prompt(
    name: str,
    category: str,
    description: str | None = None,
    location: str | None = None,
    certifications: list[str] | None = None,
) -> str:
    return MERCHANT_TEMPLATE.format(
        name=name,
        category=category,
        description=description or "Not provided",
        location=location or "Not provided",
        certifications=", ".join(certifications) if certifications else "None",
    )


def carbon_footprint_prompt(amount: float, merchant: str, category: str) -> str:
    return CARBON_FOOTPRINT_TEMPLATE.format(amount=amount, merchant=merchant, category=category)


def recommendations_prompt(preferences: list[str], history: list[dict]) -> str:
    return RECOMMENDATIONS_TEMPLATE.format(
        preferences=", ".join(preferences),
        history=json.dumps(history),
    )


def spending_patterns_prompt(transactions: list[dict]) -> str:
    return SPENDING_PATTERNS_TEMPLATE.format(transactions=json.dumps(transactions))
