"""
Database Module

Contains SQLAlchemy models, Pydantic schemas, and database configuration.
"""

from courtdesk.db.database import Base, Database, get_db
from courtdesk.db import models, schemas

__all__ = [
    'Base',
    'Database',
    'get_db',
    'models',
    'schemas'
]
