"""
Name: PostgreSQL Identity Repository Implementation

Responsibilities:
  - Implement IdentityRepository for one role table
  - Map database rows into Identity entities
  - Translate unique-constraint violations into DuplicateIdentityError

Collaborators:
  - identity_tables.IdentityTable: column / converter description
  - psycopg_pool.ConnectionPool: connection management

Constraints:
  - One credential-store read per lookup (no caching)
  - password_hash is never selected when include_secret=False
  - update() writes only the named columns and keeps the stored hash
    when the entity carries None
  - add_feedback() appends in one statement; concurrent ratings never drop
"""

from __future__ import annotations

from typing import Any, Collection, List, Optional
from uuid import UUID

from psycopg import errors as pg_errors
from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from ...domain.entities import ApprovalStatus, Identity, Role
from ...exceptions import DatabaseError, DuplicateIdentityError
from ...logger import logger
from .identity_tables import IdentityTable


class PostgresIdentityRepository:
    """R: PostgreSQL implementation of IdentityRepository."""

    def __init__(self, table: IdentityTable, pool: Optional[ConnectionPool] = None):
        self._table = table
        self._pool = pool

    @property
    def role(self) -> Role:
        return self._table.role

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ..db.pool import get_pool

        return get_pool()

    # =========================================================================
    # SQL helpers
    # =========================================================================

    def _columns(self, include_secret: bool) -> List[str]:
        columns = ["id", "username", "is_blocked", "created_at", "updated_at"]
        if include_secret:
            columns.append("password_hash")
        columns.extend(self._table.profile_columns)
        return columns

    def _select(self, include_secret: bool) -> sql.Composed:
        return sql.SQL("SELECT {columns} FROM {table}").format(
            columns=sql.SQL(", ").join(
                sql.Identifier(c) for c in self._columns(include_secret)
            ),
            table=sql.Identifier(self._table.table),
        )

    def _returning(self) -> sql.Composed:
        return sql.SQL(" RETURNING {columns}").format(
            columns=sql.SQL(", ").join(
                sql.Identifier(c) for c in self._columns(include_secret=False)
            )
        )

    def _row_to_identity(self, row: dict[str, Any]) -> Identity:
        values = {
            name: self._table.from_db(name, value) for name, value in row.items()
        }
        values.setdefault("password_hash", None)
        try:
            return self._table.entity(**values)
        except (TypeError, ValueError) as exc:
            raise DatabaseError(
                f"Invalid {self._table.table} row in database: {exc}"
            ) from exc

    def _check_unique_field(self, field: str) -> None:
        if field not in self._table.unique_fields:
            raise ValueError(f"{field} is not a unique field of {self._table.table}")

    def _duplicate(self, exc: pg_errors.UniqueViolation) -> DuplicateIdentityError:
        constraint = getattr(exc.diag, "constraint_name", None)
        field = self._table.constraint_field(constraint)
        logger.warning(
            "PostgresIdentityRepository: unique violation",
            extra={"table": self._table.table, "constraint": constraint},
        )
        return DuplicateIdentityError(field)

    def _fetch_one(self, query, params) -> Optional[dict[str, Any]]:
        with self._get_pool().connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, params)
                return cur.fetchone()

    # =========================================================================
    # IdentityRepository
    # =========================================================================

    def get_by_id(
        self, identity_id: UUID, *, include_secret: bool = True
    ) -> Optional[Identity]:
        query = self._select(include_secret) + sql.SQL(" WHERE id = %s")
        try:
            row = self._fetch_one(query, (identity_id,))
        except Exception as e:
            logger.error(f"PostgresIdentityRepository: Get by id failed: {e}")
            raise DatabaseError(f"{self._table.table} lookup failed: {e}")
        return self._row_to_identity(row) if row else None

    def get_by_username(self, username: str) -> Optional[Identity]:
        query = self._select(include_secret=True) + sql.SQL(" WHERE username = %s")
        try:
            row = self._fetch_one(query, (username,))
        except Exception as e:
            logger.error(f"PostgresIdentityRepository: Get by username failed: {e}")
            raise DatabaseError(f"{self._table.table} lookup failed: {e}")
        return self._row_to_identity(row) if row else None

    def exists(
        self, field: str, value: str, *, exclude_id: Optional[UUID] = None
    ) -> bool:
        self._check_unique_field(field)
        query = sql.SQL("SELECT 1 FROM {table} WHERE {field} = %s").format(
            table=sql.Identifier(self._table.table),
            field=sql.Identifier(field),
        )
        params: list[Any] = [value]
        if exclude_id is not None:
            query += sql.SQL(" AND id <> %s")
            params.append(exclude_id)
        query += sql.SQL(" LIMIT 1")
        try:
            return self._fetch_one(query, params) is not None
        except Exception as e:
            logger.error(f"PostgresIdentityRepository: Exists check failed: {e}")
            raise DatabaseError(f"{self._table.table} lookup failed: {e}")

    def create(self, identity: Identity) -> Identity:
        columns = ["id", "username", "password_hash", "is_blocked"]
        columns.extend(self._table.profile_columns)
        values = [
            self._table.to_db(column, getattr(identity, column)) for column in columns
        ]
        query = sql.SQL("INSERT INTO {table} ({columns}) VALUES ({values})").format(
            table=sql.Identifier(self._table.table),
            columns=sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            values=sql.SQL(", ").join(sql.Placeholder() * len(columns)),
        ) + self._returning()
        try:
            row = self._fetch_one(query, values)
        except pg_errors.UniqueViolation as exc:
            raise self._duplicate(exc) from exc
        except Exception as e:
            logger.error(f"PostgresIdentityRepository: Create failed: {e}")
            raise DatabaseError(f"{self._table.table} creation failed: {e}")

        if not row:
            raise DatabaseError(f"{self._table.table} creation failed: no row returned")
        return self._row_to_identity(row)

    def update(
        self, identity: Identity, fields: Collection[str]
    ) -> Optional[Identity]:
        columns = [
            f for f in fields if f != "password_hash" or identity.password_hash is not None
        ]
        for column in columns:
            if column not in self._table.writable_columns:
                raise ValueError(f"{column} is not writable in {self._table.table}")
        assignments = [
            sql.SQL("{} = %s").format(sql.Identifier(c)) for c in columns
        ]
        assignments.append(sql.SQL("updated_at = now()"))
        params = [
            self._table.to_db(column, getattr(identity, column)) for column in columns
        ]
        params.append(identity.id)
        query = sql.SQL("UPDATE {table} SET {assignments} WHERE id = %s").format(
            table=sql.Identifier(self._table.table),
            assignments=sql.SQL(", ").join(assignments),
        ) + self._returning()
        try:
            row = self._fetch_one(query, params)
        except pg_errors.UniqueViolation as exc:
            raise self._duplicate(exc) from exc
        except Exception as e:
            logger.error(f"PostgresIdentityRepository: Update failed: {e}")
            raise DatabaseError(f"{self._table.table} update failed: {e}")
        return self._row_to_identity(row) if row else None

    def add_feedback(
        self, identity_id: UUID, rating: int, text: str
    ) -> Optional[Identity]:
        if "ratings" not in self._table.profile_columns:
            raise ValueError(f"{self._table.table} takes no feedback")
        # R: SET expressions read the pre-update row
        query = sql.SQL(
            "UPDATE {table} SET "
            "ratings = array_append(ratings, %(rating)s::integer), "
            "feedback = array_append(feedback, %(text)s::text), "
            "average_rating = ("
            "SELECT avg(r) FROM unnest(array_append(ratings, %(rating)s::integer)) AS r), "
            "updated_at = now() "
            "WHERE id = %(id)s"
        ).format(table=sql.Identifier(self._table.table)) + self._returning()
        params = {"rating": rating, "text": text, "id": identity_id}
        try:
            row = self._fetch_one(query, params)
        except Exception as e:
            logger.error(f"PostgresIdentityRepository: Add feedback failed: {e}")
            raise DatabaseError(f"{self._table.table} feedback failed: {e}")
        return self._row_to_identity(row) if row else None

    def delete(self, identity_id: UUID) -> bool:
        query = sql.SQL("DELETE FROM {table} WHERE id = %s RETURNING id").format(
            table=sql.Identifier(self._table.table)
        )
        try:
            return self._fetch_one(query, (identity_id,)) is not None
        except Exception as e:
            logger.error(f"PostgresIdentityRepository: Delete failed: {e}")
            raise DatabaseError(f"{self._table.table} deletion failed: {e}")

    def _status_filter(
        self, approval_status: Optional[ApprovalStatus]
    ) -> tuple[sql.Composable, list[Any]]:
        if approval_status is None:
            return sql.SQL(""), []
        if not self._table.has_approval_status:
            raise ValueError(f"{self._table.table} has no approval status")
        return sql.SQL(" WHERE approval_status = %s"), [approval_status.value]

    def list_identities(
        self, *, approval_status: Optional[ApprovalStatus] = None
    ) -> List[Identity]:
        where, params = self._status_filter(approval_status)
        query = (
            self._select(include_secret=False)
            + where
            + sql.SQL(" ORDER BY created_at DESC")
        )
        try:
            with self._get_pool().connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(query, params)
                    rows = cur.fetchall()
        except Exception as e:
            logger.error(f"PostgresIdentityRepository: List failed: {e}")
            raise DatabaseError(f"{self._table.table} listing failed: {e}")
        return [self._row_to_identity(row) for row in rows]

    def count_identities(
        self, *, approval_status: Optional[ApprovalStatus] = None
    ) -> int:
        where, params = self._status_filter(approval_status)
        query = sql.SQL("SELECT count(*) AS total FROM {table}").format(
            table=sql.Identifier(self._table.table)
        ) + where
        try:
            row = self._fetch_one(query, params)
        except Exception as e:
            logger.error(f"PostgresIdentityRepository: Count failed: {e}")
            raise DatabaseError(f"{self._table.table} count failed: {e}")
        return int(row["total"]) if row else 0

    def ping(self) -> bool:
        try:
            with self._get_pool().connection() as conn:
                conn.execute("SELECT 1")
            return True
        except Exception as e:
            logger.warning(f"PostgresIdentityRepository: Ping failed: {e}")
            return False
