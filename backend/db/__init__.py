from .database import Connection, Database
from .init_db import init_database, seed_default_categories

__all__ = ['Connection', 'Database', 'init_database', 'seed_default_categories']
