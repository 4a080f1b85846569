"""Migration status checker.

Called during application startup to prevent cryptic runtime errors when
migrations haven't been run.
"""

from pathlib import Path
from typing import Any

from alembic import script
from alembic.config import Config
from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import AsyncEngine

from voxprompt.core.logging import get_logger

logger = get_logger(__name__)

ALEMBIC_INI_PATH = Path(__file__).resolve().parent.parent.parent.parent / "alembic.ini"


def get_head_revision(alembic_ini_path: Path = ALEMBIC_INI_PATH) -> str | None:
    """Latest revision available in the migration scripts."""
    if not alembic_ini_path.exists():
        logger.error("alembic_ini_not_found", path=str(alembic_ini_path))
        return None

    alembic_cfg = Config(str(alembic_ini_path))
    alembic_cfg.set_main_option("script_location", str(alembic_ini_path.parent / "alembic"))
    script_dir = script.ScriptDirectory.from_config(alembic_cfg)
    return script_dir.get_current_head()


async def check_migration_status(engine: AsyncEngine) -> dict[str, Any]:
    """Check if database migrations are up to date.

    Returns:
        Dictionary with migration status information:
        - alembic_table_exists: bool - whether alembic_version table exists
        - current_revision: Optional[str] - current database revision
        - head_revision: Optional[str] - latest available revision
        - is_up_to_date: bool - whether database is at latest revision
    """
    result: dict[str, Any] = {
        "alembic_table_exists": False,
        "current_revision": None,
        "head_revision": None,
        "is_up_to_date": False,
    }

    async with engine.connect() as conn:
        table_exists = await conn.run_sync(
            lambda sync_conn: inspect(sync_conn).has_table("alembic_version")
        )
        result["alembic_table_exists"] = table_exists

        if not table_exists:
            logger.warning("alembic_version_missing")
            return result

        current_rev = await conn.scalar(text("SELECT version_num FROM alembic_version"))
        result["current_revision"] = current_rev

    head_revision = get_head_revision()
    result["head_revision"] = head_revision

    if head_revision is not None and current_rev == head_revision:
        result["is_up_to_date"] = True
        logger.info("migrations_up_to_date", revision=current_rev)
    else:
        logger.warning(
            "migrations_out_of_date",
            current_revision=current_rev,
            head_revision=head_revision,
        )

    return result


async def require_migrations(
    engine: AsyncEngine, fail_on_outdated: bool = True
) -> None:
    """Check migration status and optionally fail if not up to date.

    Raises:
        RuntimeError: If migrations are not up to date and fail_on_outdated=True
    """
    status = await check_migration_status(engine)

    if status["is_up_to_date"]:
        return

    if not status["alembic_table_exists"]:
        error_msg = (
            "Database not initialized: the alembic_version table does not exist. "
            "Run: alembic upgrade head"
        )
    else:
        error_msg = (
            f"Database migrations out of date "
            f"(current: {status['current_revision']}, head: {status['head_revision']}). "
            f"Run: alembic upgrade head"
        )

    logger.error("migration_check_failed", detail=error_msg)
    if fail_on_outdated:
        raise RuntimeError(error_msg)
