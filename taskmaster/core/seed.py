import logging

from sqlalchemy.exc import IntegrityError

from taskmaster.core.config import Settings
from taskmaster.core.database import Base
from taskmaster.core.store import RowStore
import taskmaster.models  # noqa: F401  (registers tables)

logger = logging.getLogger(__name__)


async def init_db(store: RowStore, settings: Settings) -> None:
    """
    Make sure the tables exist and that there is a master account.

    Safe to call any number of times: table creation is checkfirst and the
    master is only inserted when no user holds the role.
    """
    await store.create_all(Base.metadata)

    master = await store.query_one("SELECT id FROM users WHERE role = 'master' LIMIT 1")
    if master:
        return

    try:
        await store.execute(
            "INSERT INTO users (username, password, role, name) VALUES ($1, $2, 'master', $3)",
            [
                settings.DEFAULT_MASTER_USERNAME,
                settings.DEFAULT_MASTER_PASSWORD,
                settings.DEFAULT_MASTER_NAME,
            ],
        )
    except IntegrityError:
        # Either a concurrent init won the race or the username is taken by a collaborator
        if await store.query_one("SELECT id FROM users WHERE role = 'master' LIMIT 1") is None:
            logger.error(
                "Cannot seed master: username '%s' already belongs to another user",
                settings.DEFAULT_MASTER_USERNAME,
            )
            raise
        return

    logger.info("Seeded default master user '%s'", settings.DEFAULT_MASTER_USERNAME)
