"""
PostgreSQL repository adapters - Implement ReviewRepository and SubmissionRepository.

This module provides the PostgreSQL implementations of the domain's
repository ports using psycopg3 with raw SQL.

Both repositories only store host-owned state: committed ratings and
submission cursors. Display derivation (filled stars, step statuses) is
never persisted.
"""

import logging
from pathlib import Path

from psycopg_pool import ConnectionPool

from softwarehub.domain.reviews import Review
from softwarehub.domain.submissions import Submission

logger = logging.getLogger(__name__)

_REVIEW_COLUMNS = "id, user_id, target_type, target_id, rating, comment, created_at"
_SUBMISSION_COLUMNS = "id, seller_id, current_step, created_at, updated_at"


def _review_from_row(row: tuple) -> Review:
    return Review(
        id=row[0],
        user_id=row[1],
        target_type=row[2],
        target_id=row[3],
        rating=row[4],
        comment=row[5],
        created_at=row[6],
    )


def _submission_from_row(row: tuple) -> Submission:
    return Submission(
        id=row[0],
        seller_id=row[1],
        current_step=row[2],
        created_at=row[3],
        updated_at=row[4],
    )


class PostgresReviewRepository:
    """
    Implements ReviewRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def add_review(
        self, user_id: int, target_type: str, target_id: int, rating: int, comment: str
    ) -> Review:
        sql = f"""
            INSERT INTO reviews (user_id, target_type, target_id, rating, comment, created_at)
            VALUES (%s, %s, %s, %s, %s, NOW())
            RETURNING {_REVIEW_COLUMNS}
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (user_id, target_type, target_id, rating, comment))
            row = cursor.fetchone()
            conn.commit()
        return _review_from_row(row)

    def list_reviews(self, target_type: str, target_id: int) -> list[Review]:
        """Return reviews for a target, newest first."""
        sql = f"""
            SELECT {_REVIEW_COLUMNS}
            FROM reviews
            WHERE target_type = %s AND target_id = %s
            ORDER BY created_at DESC, id DESC
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (target_type, target_id))
            rows = cursor.fetchall()
        return [_review_from_row(row) for row in rows]

    def list_ratings(self, target_type: str, target_id: int) -> list[int]:
        sql = """
            SELECT rating FROM reviews
            WHERE target_type = %s AND target_id = %s
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (target_type, target_id))
            return [row[0] for row in cursor.fetchall()]

    def delete_review(self, review_id: int, user_id: int) -> bool:
        """
        Delete a review owned by ``user_id``.

        The ownership check is part of the DELETE predicate, so a review
        belonging to another user is indistinguishable from a missing one.
        """
        sql = "DELETE FROM reviews WHERE id = %s AND user_id = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (review_id, user_id))
            conn.commit()
            return cursor.rowcount == 1


class PostgresSubmissionRepository:
    """
    Implements SubmissionRepository protocol via psycopg3.

    Stores one integer cursor per seller submission. Writes are scoped to
    the owning seller. The domain supplies the clamping bounds and the
    table only enforces a non-negative value.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def create_submission(self, seller_id: int) -> Submission:
        sql = f"""
            INSERT INTO submissions (seller_id, current_step, created_at, updated_at)
            VALUES (%s, 0, NOW(), NOW())
            RETURNING {_SUBMISSION_COLUMNS}
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (seller_id,))
            row = cursor.fetchone()
            conn.commit()
        return _submission_from_row(row)

    def get_submission(self, submission_id: int) -> Submission | None:
        sql = f"SELECT {_SUBMISSION_COLUMNS} FROM submissions WHERE id = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (submission_id,))
            row = cursor.fetchone()
        return _submission_from_row(row) if row is not None else None

    def set_step(self, submission_id: int, seller_id: int, step: int) -> Submission | None:
        sql = f"""
            UPDATE submissions
            SET current_step = %s, updated_at = NOW()
            WHERE id = %s AND seller_id = %s
            RETURNING {_SUBMISSION_COLUMNS}
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (step, submission_id, seller_id))
            row = cursor.fetchone()
            conn.commit()
        return _submission_from_row(row) if row is not None else None

    def move_step(
        self, submission_id: int, seller_id: int, delta: int, max_step: int
    ) -> Submission | None:
        """
        Add ``delta`` to the cursor in a single UPDATE.

        The row lock taken by UPDATE serializes concurrent moves, and the
        increment reads the committed value, so no move is lost.
        """
        sql = f"""
            UPDATE submissions
            SET current_step = GREATEST(0, LEAST(current_step + %s, %s)), updated_at = NOW()
            WHERE id = %s AND seller_id = %s
            RETURNING {_SUBMISSION_COLUMNS}
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (delta, max_step, submission_id, seller_id))
            row = cursor.fetchone()
            conn.commit()
        return _submission_from_row(row) if row is not None else None


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: softwarehub/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
