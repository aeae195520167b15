from survey_platform.config import settings
from survey_platform.infrastructure.db.datastore import DataStore


def get_health_status(datastore: DataStore) -> dict:
    db_connected = datastore.health_check()
    return {
        "app_name": settings.app_name,
        "version": settings.app_version,
        "status": "ok" if db_connected else "degraded",
        "db_connected": db_connected,
    }
