import logging
import os
import sqlite3
from contextlib import contextmanager

from config import BASE_DIR
from errors import DatabaseConnectionError, ValidationError

logger = logging.getLogger(__name__)


def dict_factory(cursor, row):
    """Convert row to dictionary"""
    fields = [column[0] for column in cursor.description]
    return {key: value for key, value in zip(fields, row)}


class DictCursorWrapper:
    """Wrapper to make a PostgreSQL cursor accept '?' placeholders and return dicts"""
    def __init__(self, cursor):
        self._cursor = cursor

    def execute(self, query, params=None):
        """Execute query, translating SQLite placeholders to psycopg2 ones"""
        query = query.replace('?', '%s')
        if params:
            return self._cursor.execute(query, params)
        return self._cursor.execute(query)

    def fetchone(self):
        """Fetch one row as dict"""
        row = self._cursor.fetchone()
        return dict(row) if row is not None else None

    def fetchall(self):
        """Fetch all rows as list of dicts"""
        return [dict(row) for row in self._cursor.fetchall()]

    @property
    def rowcount(self):
        return self._cursor.rowcount

    def __getattr__(self, name):
        """Proxy other attributes to underlying cursor"""
        return getattr(self._cursor, name)


class Connection:
    """A single database connection with prepared-statement helpers.

    Both drivers run in autocommit mode: statements issued outside of
    ``begin()``/``commit()`` are committed immediately, statements issued
    inside an explicit transaction are committed or rolled back together.
    """

    def __init__(self, raw, dialect):
        self._conn = raw
        self.dialect = dialect
        self.in_transaction = False

    @property
    def integrity_errors(self):
        if self.dialect == 'postgresql':
            import psycopg2
            return (psycopg2.IntegrityError,)
        return (sqlite3.IntegrityError,)

    def cursor(self):
        if self.dialect == 'postgresql':
            from psycopg2.extras import RealDictCursor
            return DictCursorWrapper(self._conn.cursor(cursor_factory=RealDictCursor))
        return self._conn.cursor()

    def execute(self, sql, params=()):
        """Run a statement and return its cursor"""
        cur = self.cursor()
        try:
            cur.execute(sql, tuple(params))
        except self.integrity_errors as e:
            raise ValidationError(f'Duplicate or invalid record: {e}')
        return cur

    def fetch_one(self, sql, params=()):
        return self.execute(sql, params).fetchone()

    def fetch_all(self, sql, params=()):
        return self.execute(sql, params).fetchall()

    def fetch_scalar(self, sql, params=()):
        """Return the first column of the first row, or None"""
        row = self.fetch_one(sql, params)
        if row is None:
            return None
        return next(iter(row.values()))

    def insert(self, sql, params=()):
        """Run an INSERT and return the generated id"""
        if self.dialect == 'postgresql':
            return self.execute(sql + ' RETURNING id', params).fetchone()['id']
        return self.execute(sql, params).lastrowid

    def begin(self):
        self.execute('BEGIN')
        self.in_transaction = True

    def commit(self):
        self.execute('COMMIT')
        self.in_transaction = False

    def rollback(self):
        self.execute('ROLLBACK')
        self.in_transaction = False

    @contextmanager
    def transaction(self):
        """Run the enclosed block in one transaction, rolling back on any exception"""
        self.begin()
        try:
            yield self
        except Exception as e:
            logger.warning('Rolling back transaction: %s', e)
            self.rollback()
            raise
        self.commit()

    def close(self):
        self._conn.close()


class Database:
    """Storage accessor: turns a DATABASE_URL into connections"""

    def __init__(self, url):
        self.url = url
        if url.startswith('sqlite:///'):
            self.dialect = 'sqlite'
        elif url.startswith('postgres://') or url.startswith('postgresql://'):
            self.dialect = 'postgresql'
        else:
            raise ValueError(f"Unsupported database URL format: {url}")

    @property
    def sqlite_path(self):
        db_path = self.url.replace('sqlite:///', '', 1)
        if not os.path.isabs(db_path):
            db_path = os.path.join(BASE_DIR, db_path)
        return db_path

    def _open(self):
        if self.dialect == 'sqlite':
            conn = sqlite3.connect(self.sqlite_path, isolation_level=None)
            conn.row_factory = dict_factory
            conn.execute('PRAGMA foreign_keys = ON')
            return conn

        import psycopg2
        conn = psycopg2.connect(self.url)
        conn.autocommit = True
        return conn

    @contextmanager
    def connect(self):
        """Get database connection as context manager"""
        try:
            raw = self._open()
        except Exception as e:
            logger.error('Database connection error: %s', e)
            raise DatabaseConnectionError('Database connection failed')

        conn = Connection(raw, self.dialect)
        try:
            yield conn
            if conn.in_transaction:
                conn.commit()
        except Exception:
            if conn.in_transaction:
                conn.rollback()
            raise
        finally:
            conn.close()

    def ping(self):
        """Return True when a connection can be opened and queried"""
        try:
            with self.connect() as conn:
                conn.fetch_scalar('SELECT 1')
            return True
        except DatabaseConnectionError:
            return False
