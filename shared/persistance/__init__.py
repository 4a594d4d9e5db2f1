"""
Persistance package - Database connections.
"""
from shared.persistance.mongo_db import MongoDBPool

__all__ = ["MongoDBPool"]
