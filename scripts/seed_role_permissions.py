"""
Seed default role permissions for companies.

Companies are seeded lazily on their first permission read; this script
does it up front, e.g. right after onboarding a batch of tenants.

Usage:
    uv run python -m scripts.seed_role_permissions 01HZX3C9Q1V7M6B2T8K4N5P0RS [...]
    uv run python -m scripts.seed_role_permissions --all
"""
import argparse
import asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db, init_db
from app.features.companies.models import Company
from app.features.role_permissions import store
from app.features.role_permissions.constants import DEFAULT_ROLE_FEATURES, StaffRole, default_features
from app.features.role_permissions.service import initialize_default_permissions
from app.utils import get_logger


log = get_logger(__name__)


async def seed_company(db: AsyncSession, company_id: str, force: bool = False) -> int:
    """
    Seed one company.

    Companies that already have records are skipped unless ``force`` is set,
    in which case every role, customized or not, is overwritten with its
    defaults.

    Returns:
        Number of records written
    """
    if force:
        for role in StaffRole:
            await store.upsert(db, company_id, role, default_features(role))
        log.info(f"Reset {len(StaffRole)} role permissions to defaults for company {company_id}")
        return len(StaffRole)

    existing = await store.find_all(db, company_id)
    if existing:
        log.debug(f"Company {company_id} already has {len(existing)} role permissions, skipping")
        return 0

    seeded = await initialize_default_permissions(db, company_id)
    log.info(f"Seeded {len(seeded)} role permissions for company {company_id}")
    return len(seeded)


async def active_company_ids(db: AsyncSession) -> list[str]:
    result = await db.execute(select(Company.id).where(Company.is_active.is_(True)))
    return list(result.scalars().all())


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed default role permissions")
    parser.add_argument("company_ids", nargs="*", help="Company ULIDs to seed")
    parser.add_argument("--all", action="store_true", help="Seed every active company")
    parser.add_argument("--force", action="store_true", help="Reset existing records to defaults")
    args = parser.parse_args(argv)
    if not args.company_ids and not args.all:
        parser.error("pass company ids or --all")
    return args


async def main(argv=None):
    """Main function to seed role permissions."""
    args = parse_args(argv)
    log.info("Starting role permission seeding...")
    
    # Initialize database tables first
    await init_db()
    
    async for db in get_db():
        try:
            company_ids = list(args.company_ids)
            if args.all:
                company_ids.extend(await active_company_ids(db))

            written = 0
            for company_id in dict.fromkeys(company_ids):
                written += await seed_company(db, company_id, force=args.force)

            log.info(f"Role permission seeding completed: {written} records written")
            log.info("Default roles:")
            for role, features in DEFAULT_ROLE_FEATURES.items():
                log.info(f"  - {role.value}: {len(features)} features")
        except Exception as e:
            log.error(f"Error seeding role permissions: {e}", exc_info=True)
            await db.rollback()
            raise
        
        break  # Only use first session


if __name__ == "__main__":
    asyncio.run(main())
