from pymongo import MongoClient
from app.config import settings

_connections = {}

def get_client():
    if "default" not in _connections:
        _connections["default"] = MongoClient(settings.mongo_uri(), tz_aware=True)
    return _connections["default"]

def get_db(db_name: str | None = None):
    return get_client()[db_name or settings.MONGO_DB_NAME]

def get_collection(name: str):
    return get_db()[name]

def close_client():
    client = _connections.pop("default", None)
    if client is not None:
        client.close()
