"""
Catalog database connection handling (psycopg3)

One pool is opened per import run and shared by the bunch processor
and the schema manager. Settings come from explicit arguments first,
then the DB_* environment variables.
"""
import os
import time
from contextlib import contextmanager
from typing import Any

from psycopg import OperationalError
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool
from pydantic import BaseModel, Field, field_validator

from src.observability.logger import get_logger

logger = get_logger(__name__)


class ConnectionSettings(BaseModel):
    """Where the catalog database lives and how to log into it"""

    host: str = "localhost"
    port: int = Field(default=5432, gt=0)
    database: str = "catalog"
    user: str = "importer"
    password: str
    connect_timeout: float = Field(default=30.0, gt=0)

    @field_validator("password")
    @classmethod
    def password_must_be_set(cls, v: str) -> str:
        if not v:
            raise ValueError(
                "Database password must be provided. "
                "Set DB_PASSWORD environment variable or pass it explicitly."
            )
        return v

    @classmethod
    def from_env(cls, **overrides: Any) -> "ConnectionSettings":
        """Build settings from DB_* variables; non-None overrides win."""
        values = {
            "host": os.getenv("DB_HOST", "localhost"),
            "port": os.getenv("DB_PORT", "5432"),
            "database": os.getenv("DB_NAME", "catalog"),
            "user": os.getenv("DB_USER", "importer"),
            "password": os.getenv("DB_PASSWORD", ""),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @property
    def conninfo(self) -> str:
        return (
            f"host={self.host} port={self.port} dbname={self.database} "
            f"user={self.user} password={self.password} "
            f"connect_timeout={int(self.connect_timeout)}"
        )


class DatabaseConnectionPool:
    """
    Pooled access to the catalog database.

    Rows come back as dictionaries. Every write helper commits before
    the connection returns to the pool.
    """

    def __init__(
        self,
        settings: ConnectionSettings | None = None,
        min_size: int = 2,
        max_size: int = 10,
        **overrides: Any,
    ) -> None:
        """
        Args:
            settings: Explicit connection settings; built from the
                environment and `overrides` (host, port, database,
                user, password) when omitted
            min_size: Minimum pool size
            max_size: Maximum pool size

        Raises:
            ValueError: If no password is configured
        """
        self.settings = settings or ConnectionSettings.from_env(**overrides)
        self.min_size = min_size
        self.max_size = max_size
        self._pool: ConnectionPool | None = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def open(self, max_retries: int = 3, retry_delay: float = 2.0) -> None:
        """
        Open the pool, retrying while the database is not reachable yet.

        Raises:
            OperationalError: If every attempt fails
        """
        if self._pool is not None:
            return

        pool = ConnectionPool(
            conninfo=self.settings.conninfo,
            min_size=self.min_size,
            max_size=self.max_size,
            timeout=self.settings.connect_timeout,
            kwargs={"row_factory": dict_row},
            open=False,
        )

        for attempt in range(1, max_retries + 1):
            try:
                pool.open(wait=True, timeout=self.settings.connect_timeout)
                break
            except (OperationalError, TimeoutError) as e:
                if attempt == max_retries:
                    pool.close()
                    raise OperationalError(
                        f"Failed to connect to {self.settings.host}:{self.settings.port}"
                        f"/{self.settings.database} after {max_retries} attempts: {e}"
                    ) from e
                logger.warning(
                    f"Database not reachable (attempt {attempt}/{max_retries}), retrying",
                    extra={"host": self.settings.host, "error": str(e)}
                )
                time.sleep(retry_delay)

        self._pool = pool
        logger.info(
            "Connection pool opened",
            extra={"host": self.settings.host, "database": self.settings.database}
        )

    def close(self) -> None:
        if self._pool is not None:
            self._pool.close()
            self._pool = None

    @contextmanager
    def get_connection(self):
        """
        Borrow a connection from the pool.

        Raises:
            RuntimeError: If the pool is not open
        """
        if self._pool is None:
            raise RuntimeError("Connection pool is not open. Call open() first.")

        with self._pool.connection() as conn:
            yield conn

    def _run(self, sql: str, params: tuple | None, fetch: str | None, commit: bool):
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                if fetch == "all":
                    result = cur.fetchall()
                elif fetch == "one":
                    result = cur.fetchone()
                else:
                    result = cur.rowcount
            if commit:
                conn.commit()
            return result

    def execute_query(self, query: str, params: tuple | None = None) -> list[dict]:
        """Run a SELECT and return all rows."""
        return self._run(query, params, fetch="all", commit=False)

    def execute_command(self, command: str, params: tuple | None = None) -> int:
        """Run a write statement, commit, and return the affected row count."""
        return self._run(command, params, fetch=None, commit=True)

    def execute_returning(self, command: str, params: tuple | None = None) -> dict | None:
        """Run a write statement with a RETURNING clause, commit, and return its first row."""
        return self._run(command, params, fetch="one", commit=True)

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


# Pool shared by one CLI run
_global_pool: DatabaseConnectionPool | None = None


def initialize_pool(**kwargs) -> DatabaseConnectionPool:
    """Open the process-wide pool, replacing any previous one."""
    global _global_pool
    close_pool()

    _global_pool = DatabaseConnectionPool(**kwargs)
    _global_pool.open()
    return _global_pool


def close_pool() -> None:
    global _global_pool
    if _global_pool is not None:
        _global_pool.close()
        _global_pool = None
