"""
MongoDB Connection Pool - One client per process, handed to the app at startup.
"""
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from typing import Optional


class MongoDBPool:
    """MongoDB connection pool owned by the application lifecycle."""

    def __init__(self, uri: Optional[str] = None, db_name: Optional[str] = None):
        self._uri = uri
        self._db_name = db_name
        self._client: Optional[MongoClient] = None

    def connect(self, uri: Optional[str] = None) -> MongoClient:
        """
        Initialize or return existing MongoDB client.
        Uses connection pooling by default (maxPoolSize=100).
        """
        if uri is not None:
            self._uri = uri
        if self._client is None:
            client = MongoClient(
                self._uri,
                maxPoolSize=100,
                minPoolSize=10,
                maxIdleTimeMS=30000,
                connectTimeoutMS=5000,
                serverSelectionTimeoutMS=5000,
                tz_aware=True,
            )
            try:
                # Test connection
                client.admin.command("ping")
            except Exception:
                client.close()
                raise
            self._client = client
        return self._client

    def get_database(self, db_name: Optional[str] = None) -> Database:
        """Get database instance."""
        return self.client[db_name or self._db_name]

    def get_collection(self, collection_name: str, db_name: Optional[str] = None) -> Collection:
        """Get collection from database."""
        db = self.get_database(db_name)
        return db[collection_name]

    def ping(self) -> bool:
        """Return True if the server answers a ping."""
        if self._client is None:
            return False
        self._client.admin.command("ping")
        return True

    def close(self) -> None:
        """Close MongoDB connection."""
        if self._client:
            self._client.close()
            self._client = None

    @property
    def client(self) -> MongoClient:
        """Get raw client (connects if needed)."""
        if self._client is None:
            self.connect()
        return self._client
