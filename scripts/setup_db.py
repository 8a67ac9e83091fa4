"""
Database Setup Script
Creates the profile and report tables, optionally seeding a demo profile

Run: python scripts/setup_db.py [--reset] [--seed-user UID]
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
ROOT_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT_DIR))

from commentlens.app.config import get_config, setup_logging, validate_config
from commentlens.app.database import db_manager
from commentlens.services import PersistenceService


async def setup(reset: bool, seed_user: str) -> None:
    print("\n🔌 Testing database connection...")
    if not await db_manager.ping():
        raise RuntimeError("SELECT 1 returned an unexpected value")
    print("✅ Database connection successful")

    if reset:
        print("\n🧹 Dropping existing tables...")
        await db_manager.drop_tables()

    print("\n📊 Creating database tables...")
    await db_manager.create_tables()

    if seed_user:
        service = PersistenceService(database=db_manager)
        profile = await service.get_profile(seed_user)
        if profile is None:
            profile = await service.create_profile(seed_user, full_name="Demo Creator")
            print(f"\n👤 Seeded profile {profile.uid} with {profile.credits} credits")
        else:
            print(f"\n👤 Profile {profile.uid} already exists ({profile.credits} credits)")

    await db_manager.close()


def main():
    """Initialize database and validate configuration"""
    parser = argparse.ArgumentParser(description="Create CommentLens tables")
    parser.add_argument("--reset", action="store_true", help="Drop tables first")
    parser.add_argument("--seed-user", default="", help="Create a profile for this uid")
    args = parser.parse_args()

    print("=" * 60)
    print("🔧 CommentLens - Database Setup")
    print("=" * 60)

    setup_logging()

    print("\n🔍 Validating Configuration...")
    validation = validate_config()

    if not validation["valid"]:
        print("\n❌ Configuration validation failed:")
        for error in validation["errors"]:
            print(f"  - {error}")
        sys.exit(1)

    if validation["warnings"]:
        print("\n⚠️  Configuration warnings:")
        for warning in validation["warnings"]:
            print(f"  - {warning}")

    print(f"\n📦 Using database: {get_config().database.url}")

    try:
        asyncio.run(setup(args.reset, args.seed_user))
    except Exception as e:
        print(f"\n❌ Database setup failed: {e}")
        import traceback

        traceback.print_exc()
        sys.exit(1)

    print("\n" + "=" * 60)
    print("✅ Database setup complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
