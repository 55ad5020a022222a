"""
MongoDB client manager that creates and tracks Motor clients by label.
"""

import atexit
import threading
from urllib.parse import parse_qs, urlsplit

from loguru import logger
from motor.motor_asyncio import AsyncIOMotorClient

from ..config import config


def hide_password(connection_string: str) -> str:
    """Mask the password of a MongoDB connection string for logging."""
    try:
        scheme, rest = connection_string.split("://", 1)
        auth, sep, host = rest.rpartition("@")
        if not sep or ":" not in auth:
            return connection_string
        username, password = auth.split(":", 1)
        if not username or not password:
            return connection_string
        return f"{scheme}://{username}:***@{host}"
    except ValueError:
        return connection_string


def extract_replica_set_name(connection_string: str) -> str | None:
    query = urlsplit(connection_string).query
    values = parse_qs(query).get("replicaSet")
    return values[0] if values else None


class MongoManager:
    """
    MongoDB client manager.

    Connection strings come from `MONGO_URL_<LABEL>` keys of the central
    configuration; `default` falls back to `MONGO_URL_DEFAULT` / `MONGO_URL`.
    All clients are closed on process exit.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if hasattr(self, "_initialized"):
            return

        self._clients: dict[str, AsyncIOMotorClient] = {}
        self._connection_strings: dict[str, str] = {}
        self._clients_lock = threading.Lock()
        self._max_pool_size = config.get_mongo_max_pool_size()
        self._server_selection_timeout = config.get_mongo_timeout("MONGO_SERVER_SELECTION_TIMEOUT", 30000)
        self._connect_timeout = config.get_mongo_timeout("MONGO_CONNECT_TIMEOUT", 30000)
        self._socket_timeout = config.get_mongo_timeout("MONGO_SOCKET_TIMEOUT", 300000)

        self._load_connection_strings()
        atexit.register(self.close_all)

        self._initialized = True

    def _load_connection_strings(self):
        for key, value in config.items():
            if not key.startswith("MONGO_URL_") or not value:
                continue
            label = key[len("MONGO_URL_"):].lower()
            self._connection_strings[label] = value
            logger.info("Loaded MongoDB connection string for label '{}': {}", label, hide_password(value))

        if "default" not in self._connection_strings:
            self._connection_strings["default"] = config.get_mongo_url("default")

        logger.info(
            "Loaded {} MongoDB connection strings: {}",
            len(self._connection_strings),
            list(self._connection_strings.keys()),
        )

    def _create_client(self, connection_string: str, label: str) -> AsyncIOMotorClient:
        options = dict(
            serverSelectionTimeoutMS=self._server_selection_timeout,
            connectTimeoutMS=self._connect_timeout,
            socketTimeoutMS=self._socket_timeout,
            maxPoolSize=self._max_pool_size,
        )
        replica_set_name = extract_replica_set_name(connection_string)
        if replica_set_name:
            options["replicaSet"] = replica_set_name
            logger.info("Open MongoDB client for label '{}' with replica set '{}'", label, replica_set_name)
        else:
            logger.info("Open MongoDB client for label '{}'", label)

        return AsyncIOMotorClient(connection_string, **options)

    def get_client(self, label: str | None = None) -> AsyncIOMotorClient:
        """
        Get MongoDB client by label.

        Raises:
            ValueError: If no connection string is configured for the label
        """
        label = label or "default"

        with self._clients_lock:
            if label not in self._clients:
                connection_string = self._connection_strings.get(label)
                if not connection_string:
                    # Fall back to the default connection for unconfigured labels
                    connection_string = self._connection_strings.get("default")
                if not connection_string:
                    raise ValueError(f"No MongoDB connection string found for label '{label}'")
                self._clients[label] = self._create_client(connection_string, label)

            return self._clients[label]

    def close_client(self, label: str):
        with self._clients_lock:
            client = self._clients.pop(label, None)
        if client is not None:
            client.close()
            logger.info("Closed MongoDB client for label '{}'", label)

    def close_all(self):
        with self._clients_lock:
            labels = list(self._clients.keys())
        for label in labels:
            self.close_client(label)


_mongo_manager = None


def get_mongo_manager() -> MongoManager:
    """Get the global MongoDB manager instance."""
    global _mongo_manager
    if _mongo_manager is None:
        _mongo_manager = MongoManager()
    return _mongo_manager


def get_mongo_client(label: str | None = None) -> AsyncIOMotorClient:
    """Get MongoDB client by label."""
    return get_mongo_manager().get_client(label)
