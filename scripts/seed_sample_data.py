import asyncio
import os
import sys

# Add project root/backend to path
sys.path.append(os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "backend"))

from sqlalchemy import func, select

from registry_api.core.config import settings
from registry_api.core.logging import configure_logging
from registry_api.db.session import AsyncSessionLocal, engine
from registry_api.db.seed import seed_sample_data
from registry_api.models import Server


async def seed() -> None:
    print(f"Seeding sample servers into {settings.DATABASE_URL}...")

    async with AsyncSessionLocal() as session:
        existing = await session.scalar(select(func.count()).select_from(Server))
        if existing:
            print(f"Registry already holds {existing} server(s); nothing to do.")
            return

        servers = await seed_sample_data(session)
        for server in servers:
            print(f"Created {server.name} -> {server.server_id}")

    print("SUCCESS: sample data seeded.")


async def main() -> None:
    try:
        await seed()
    finally:
        await engine.dispose()


if __name__ == "__main__":
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(main())
