"""
Example script walking through the finance back-office API.

This script shows how to:
1. Book income and expenses
2. Set a budget and watch it raise an alert
3. Read income, payouts and the overview for this month
4. Download the CSV and PDF exports
"""

import asyncio
from pathlib import Path

import httpx


class FinanceExample:
    def __init__(self, base_url: str = "http://localhost:8000"):
        self.base_url = f"{base_url}/api/v1"
        self.client = httpx.AsyncClient()

    async def close(self):
        await self.client.aclose()

    async def authenticate(self, email: str, password: str):
        """Authenticate and get access token."""
        response = await self.client.post(
            f"{self.base_url}/auth/login",
            data={"username": email, "password": password},
        )
        response.raise_for_status()
        token = response.json()["access_token"]
        self.client.headers.update({"Authorization": f"Bearer {token}"})
        print(f"✓ Authenticated as {email}")

    async def book(self, type_: str, amount: float, category: str, description: str = ""):
        response = await self.client.post(
            f"{self.base_url}/finance/transactions",
            json={"type": type_, "amount": amount, "category": category, "description": description},
        )
        response.raise_for_status()
        data = response.json()
        for alert in data["budget_alerts"]:
            print(f"  ⚠ Budget '{alert['budget_name']}' at {alert['utilization']:.0%}")
        return data

    async def get(self, path: str, **params):
        response = await self.client.get(f"{self.base_url}/finance/{path}", params=params)
        response.raise_for_status()
        return response

    async def run(self):
        await self.client.post(
            f"{self.base_url}/finance/budgets",
            json={
                "name": "Fuel",
                "amount": 20000,
                "categories": ["Fuel"],
                "alert_threshold": 0.8,
                "notify_email": "ops@agrolink.org",
            },
        )

        await self.book("INCOME", 45000, "Sales", "Weekend market")
        await self.book("EXPENSE", 12000, "Fuel", "Diesel for collection truck")
        await self.book("EXPENSE", 5000, "Fuel", "Generator")

        summary = (await self.get("summary")).json()
        print(f"\nBalance: {summary['balance']} (income {summary['income']}, expenses {summary['expenses']})")

        overview = (await self.get("overview", range="month")).json()
        print("\nIncome by source this month:")
        for source, amount in overview["income_by_source"].items():
            print(f"  {source:<24} {amount}")
        print(f"Net profit: {overview['net_profit']}")

        drivers = (await self.get("expenses/driver-payouts", range="month", rateType="flat", rateValue=300)).json()
        print(f"\nDriver payouts: {drivers['total']} for {drivers['count']} deliveries")

        Path("finance.csv").write_text((await self.get("reports/transactions.csv")).text)
        Path("overview.pdf").write_bytes((await self.get("reports/overview.pdf", range="month")).content)
        print("\n✓ Saved finance.csv and overview.pdf")


async def main():
    example = FinanceExample()
    try:
        await example.authenticate("admin@agrolink.org", "change-me-please")
        await example.run()
    finally:
        await example.close()


if __name__ == "__main__":
    asyncio.run(main())
