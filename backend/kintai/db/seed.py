"""
Seed script: creates a demo company with a few staff wage profiles.

Usage (inside container):
    python -m kintai.db.seed
"""

import asyncio

from sqlalchemy import select

from kintai.db.models import Company, Staff
from kintai.db.session import AsyncSessionLocal

DEMO_COMPANY = "デモ株式会社"

DEMO_STAFF = [
    {"name": "山田 太郎", "pin": "1001", "role": "staff", "hourly_wage": 1200, "dependents": 1},
    {
        "name": "佐藤 花子",
        "pin": "1002",
        "role": "staff",
        "hourly_wage": 1100,
        "allowance1_name": "交通費",
        "allowance1_value": 5000,
    },
    {"name": "鈴木 一郎", "pin": "1003", "role": "staff", "hourly_wage": 1050, "tax_category": "乙"},
    {"name": "管理者", "pin": "0000", "role": "admin", "hourly_wage": 0},
]


async def create_company(session) -> Company:
    result = await session.execute(select(Company).where(Company.name == DEMO_COMPANY))
    company = result.scalar_one_or_none()
    if company:
        print("Demo company already exists, skipping.")
        return company

    company = Company(name=DEMO_COMPANY, address="東京都千代田区")
    session.add(company)
    await session.flush()
    print(f"Created company: id={company.id}")
    return company


async def create_staff(session, company: Company) -> None:
    for data in DEMO_STAFF:
        result = await session.execute(select(Staff).where(Staff.pin == data["pin"]))
        if result.scalar_one_or_none() is not None:
            print(f"Staff with PIN {data['pin']} already exists, skipping.")
            continue
        fields = {"tax_category": "甲", **data}
        staff = Staff(company_id=company.id, **fields)
        session.add(staff)
        await session.flush()
        print(f"Created staff: pin={staff.pin} id={staff.id}")


async def main():
    async with AsyncSessionLocal() as session:
        async with session.begin():
            company = await create_company(session)
            await create_staff(session, company)
            print("Seed complete.")


if __name__ == "__main__":
    asyncio.run(main())
