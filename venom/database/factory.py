"""Build the configured ProjectStore."""

from venom.config import Settings
from venom.database.http import HttpProjectStore
from venom.database.sqlite import SqliteProjectStore
from venom.database.store import ProjectStore


def create_store(settings: Settings) -> ProjectStore:
    """Return the store selected by ``settings.store_backend`` (not yet connected)."""
    if settings.store_backend == "http":
        return HttpProjectStore(
            settings.store_url,
            bucket=settings.bucket,
            scope=settings.scope,
            collection=settings.collection,
            token=settings.store_token,
            timeout=settings.operation_timeout,
        )
    return SqliteProjectStore(settings.db_path, collection=settings.collection)
