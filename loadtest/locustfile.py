"""Load testing script for the ConsizeN AI proxy using Locust.

Run with: locust -f loadtest/locustfile.py --host=http://localhost:8000

Or headless mode:
    locust -f loadtest/locustfile.py --host=http://localhost:8000 \
           --headless -u 10 -r 2 -t 60s
"""

import random

from locust import HttpUser, between, task

# Merchant/transaction prompts as sent by the dashboard
TRANSACTION_PROMPTS = [
    "Merchant: Starbucks Coffee, Amount: $4.50, Category: Food & Drink",
    "Merchant: Whole Foods Market, Amount: $82.10, Category: Groceries",
    "Merchant: Shell, Amount: $45.00, Category: Fuel",
    "Merchant: Patagonia, Amount: $129.00, Category: Clothing",
    "Merchant: Uber, Amount: $18.75, Category: Transport",
    "Merchant: Amazon, Amount: $36.99, Category: Shopping",
]

GENERAL_PROMPTS = [
    "What is a carbon offset?",
    "How can I reduce my grocery footprint?",
    "Explain scope 3 emissions in one paragraph",
]

COMPLEXITIES = ["low", "medium", "high"]


class DashboardUser(HttpUser):
    """Simulated dashboard user requesting analyses."""

    wait_time = between(0.5, 2.0)

    @task(10)
    def sustainability_analysis(self):
        """Repeated merchant prompts, mostly served from cache."""
        self.client.post(
            "/api/gemini",
            json={"prompt": random.choice(TRANSACTION_PROMPTS), "task": "sustainability_analysis"},
            name="/api/gemini (sustainability)",
        )

    @task(5)
    def general_prompt(self):
        self.client.post(
            "/api/gemini",
            json={
                "prompt": random.choice(GENERAL_PROMPTS),
                "modelComplexity": random.choice(COMPLEXITIES),
            },
            name="/api/gemini (general)",
        )

    @task(2)
    def unique_prompt(self):
        """Prompts that always miss the cache."""
        self.client.post(
            "/api/gemini",
            json={"prompt": f"Merchant: Local Shop #{random.randint(1, 10_000)}, Amount: $10.00"},
            name="/api/gemini (unique)",
        )

    @task(1)
    def challenges(self):
        self.client.get("/api/analysis/challenges", name="/api/analysis/challenges")

    @task(1)
    def check_stats(self):
        """Check proxy statistics."""
        self.client.get("/api/stats", name="/api/stats")

    @task(1)
    def check_ready(self):
        self.client.get("/api/gemini", name="/api/gemini (ready)")
