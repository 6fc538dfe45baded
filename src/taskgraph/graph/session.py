"""Session and transaction layer over the Kuzu embedded database.

This module gives callers a driver/session/transaction shape on top of Kuzu:

- GraphDriver owns the kuzu.Database and applies the schema.
- GraphSession wraps one kuzu.Connection for the length of one operation.
- ManagedTransaction runs parametrized statements inside an explicit
  transaction opened by GraphSession.execute_read/execute_write.

Every transaction commits when its unit of work returns and rolls back when
it raises. Kuzu failures surface as StoreUnavailableError and are never
retried.

Kuzu admits a single write transaction at a time and rejects a second
BEGIN instead of queueing it. Write transactions therefore hold the
driver's write lock from BEGIN until COMMIT or ROLLBACK; read
transactions run without it.
"""

import logging
import threading
from pathlib import Path
from types import TracebackType
from typing import Any, Callable, Optional, TypeVar

import kuzu

from taskgraph.core.constants import AccessMode
from taskgraph.core.exceptions import StoreUnavailableError
from taskgraph.graph.schema import initialize_schema

logger = logging.getLogger(__name__)

T = TypeVar("T")
Row = list[Any]


class ManagedTransaction:
    """Statement runner bound to an open transaction."""

    def __init__(self, conn: kuzu.Connection, read_only: bool) -> None:
        self._conn = conn
        self._read_only = read_only

    @property
    def read_only(self) -> bool:
        """Check if the enclosing transaction is read-only."""
        return self._read_only

    def run(self, query: str, params: Optional[dict[str, Any]] = None) -> list[Row]:
        """Execute one parametrized statement and return all rows.

        Args:
            query: Cypher statement with $-prefixed parameters.
            params: Named parameter mapping.

        Returns:
            List of rows; each row is addressable by position.

        Raises:
            StoreUnavailableError: If Kuzu rejects or fails the statement.
        """
        try:
            result = self._conn.execute(query, params or {})
        except RuntimeError as e:
            raise StoreUnavailableError(
                f"Statement failed: {e}", operation="run"
            ) from e

        rows: list[Row] = []
        while result.has_next():
            rows.append(result.get_next())
        result.close()
        return rows


class GraphSession:
    """A connection scoped to a single repository operation.

    Example:
        with driver.session(AccessMode.READ) as session:
            rows = session.execute_read(lambda tx: tx.run("MATCH (t:Task) RETURN t.id"))
    """

    def __init__(
        self,
        db: kuzu.Database,
        access_mode: AccessMode,
        write_lock: Optional[threading.Lock] = None,
    ) -> None:
        self._access_mode = access_mode
        self._write_lock = write_lock or threading.Lock()
        try:
            self._conn: Optional[kuzu.Connection] = kuzu.Connection(db)
        except RuntimeError as e:
            raise StoreUnavailableError(
                f"Could not open connection: {e}", operation="session"
            ) from e

    @property
    def access_mode(self) -> AccessMode:
        return self._access_mode

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def execute_read(self, work: Callable[..., T], *args: Any) -> T:
        """Run work(tx, *args) inside a read-only transaction."""
        return self._run_transaction(work, args, read_only=True)

    def execute_write(self, work: Callable[..., T], *args: Any) -> T:
        """Run work(tx, *args) inside a write transaction.

        Raises:
            StoreUnavailableError: If the session was opened in read mode.
        """
        if self._access_mode is AccessMode.READ:
            raise StoreUnavailableError(
                "Write transaction requested on a read session",
                operation="execute_write",
            )
        with self._write_lock:
            return self._run_transaction(work, args, read_only=False)

    def _run_transaction(
        self, work: Callable[..., T], args: tuple[Any, ...], read_only: bool
    ) -> T:
        conn = self._require_conn()
        begin = "BEGIN TRANSACTION READ ONLY" if read_only else "BEGIN TRANSACTION"
        self._control(conn, begin)

        try:
            value = work(ManagedTransaction(conn, read_only), *args)
        except BaseException:
            self._rollback(conn)
            raise

        self._control(conn, "COMMIT")
        return value

    def _control(self, conn: kuzu.Connection, statement: str) -> None:
        try:
            conn.execute(statement)
        except RuntimeError as e:
            raise StoreUnavailableError(
                f"{statement} failed: {e}", operation=statement.split()[0].lower()
            ) from e

    def _rollback(self, conn: kuzu.Connection) -> None:
        try:
            conn.execute("ROLLBACK")
        except RuntimeError as e:
            # Kuzu already rolled back after a failed statement
            logger.debug(f"Rollback skipped: {e}")

    def _require_conn(self) -> kuzu.Connection:
        if self._conn is None:
            raise StoreUnavailableError("Session is closed", operation="session")
        return self._conn

    def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        conn.close()

    def __enter__(self) -> "GraphSession":
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()


class GraphDriver:
    """Owns the Kuzu database and hands out sessions.

    The driver is constructed explicitly and passed to whoever needs the
    store; there is no process-wide handle.

    Example:
        driver = GraphDriver(Path(".taskgraph/data/tasks.kuzu"))
        driver.initialize()
        with driver.session(AccessMode.WRITE) as session:
            session.execute_write(create_task, task)
        driver.close()
    """

    def __init__(self, db_path: Path) -> None:
        """Initialize the driver.

        Args:
            db_path: Path to the Kuzu database directory.
        """
        self._db_path = Path(db_path)
        self._db: Optional[kuzu.Database] = None
        self._write_lock = threading.Lock()

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def is_initialized(self) -> bool:
        """Check if the database is open."""
        return self._db is not None

    def initialize(self) -> None:
        """Open the database and apply the schema.

        This method is idempotent and safe to call multiple times.

        Raises:
            StoreUnavailableError: If the database cannot be opened.
        """
        if self._db is not None:
            return

        # Kuzu creates the database directory itself, not its parents
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            db = kuzu.Database(str(self._db_path))
            conn = kuzu.Connection(db)
            try:
                initialize_schema(conn)
            finally:
                conn.close()
        except RuntimeError as e:
            raise StoreUnavailableError(
                f"Could not open graph database: {e}",
                operation="initialize",
                details={"path": str(self._db_path)},
            ) from e

        self._db = db
        logger.info(f"Graph database ready at {self._db_path}")

    def close(self) -> None:
        """Close the database. The driver can be re-initialized afterwards."""
        if self._db is None:
            return
        db, self._db = self._db, None
        db.close()
        logger.info(f"Graph database closed at {self._db_path}")

    def session(self, access_mode: AccessMode = AccessMode.WRITE) -> GraphSession:
        """Open a new session.

        Raises:
            StoreUnavailableError: If the driver is not initialized.
        """
        if self._db is None:
            raise StoreUnavailableError(
                "GraphDriver not initialized. Call initialize() first.",
                operation="session",
            )
        return GraphSession(self._db, access_mode, self._write_lock)

    def __enter__(self) -> "GraphDriver":
        self.initialize()
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()
