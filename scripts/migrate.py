import argparse
import asyncio
import os
import sys

# Add project root/backend to path
BACKEND_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "backend")
sys.path.append(BACKEND_DIR)

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

from registry_api.core.config import settings
from registry_api.db.session import build_engine


def alembic_config() -> Config:
    config = Config(os.path.join(BACKEND_DIR, "alembic.ini"))
    config.set_main_option("script_location", os.path.join(BACKEND_DIR, "alembic"))
    config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
    return config


async def applied_revisions() -> set:
    engine = build_engine(settings.DATABASE_URL)
    try:
        async with engine.connect() as connection:
            heads = await connection.run_sync(
                lambda sync_conn: MigrationContext.configure(sync_conn).get_current_heads()
            )
    finally:
        await engine.dispose()

    return set(heads)


def status(config: Config) -> int:
    script = ScriptDirectory.from_config(config)
    current = asyncio.run(applied_revisions())

    # Everything reachable from the current heads counts as applied
    applied = set()
    for head in current:
        applied.update(rev.revision for rev in script.iterate_revisions(head, "base"))

    pending = 0
    for rev in reversed(list(script.walk_revisions())):
        marker = "applied" if rev.revision in applied else "pending"
        if marker == "pending":
            pending += 1
        print(f"[{marker}] {rev.revision}  {rev.doc}")

    print(f"{len(applied)} applied, {pending} pending")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Apply or inspect registry schema migrations")
    parser.add_argument("action", nargs="?", choices=["upgrade", "status"], default="upgrade")
    args = parser.parse_args(argv)

    config = alembic_config()
    if args.action == "status":
        return status(config)

    print(f"Upgrading {settings.DATABASE_URL} to head...")
    command.upgrade(config, "head")
    print("Migrations complete.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
