"""Repository adapters - Database implementations."""

from .postgres import PostgresReviewRepository, PostgresSubmissionRepository, run_migrations

__all__ = ["PostgresReviewRepository", "PostgresSubmissionRepository", "run_migrations"]
