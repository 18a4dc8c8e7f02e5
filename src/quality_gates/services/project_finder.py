"""Project finder -- association search backed by SQLite."""
from __future__ import annotations

import logging

from src.quality_gates.association import has_more_results
from src.shared.constants import MEMBERSHIP_DESELECTED, MEMBERSHIP_SELECTED
from src.shared.db.connection import ConnectionPool
from src.shared.errors import QualityGateNotFoundError
from src.shared.models.qualitygates import (
    Association,
    ProjectQgateAssociation,
    ProjectQgateAssociationQuery,
)
from src.shared.utils import like_pattern

logger = logging.getLogger(__name__)


class QgateProjectFinder:
    """Finds projects associated (or not) with a quality gate.

    Projects are ordered by Unicode-lower-cased name, then id.  Name
    matching folds non-ASCII letters too, through the ``unicode_lower``
    SQL function every pooled connection registers.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def find(self, query: ProjectQgateAssociationQuery) -> Association:
        """Return one page of project associations for ``query.gate_id``.

        Raises :class:`QualityGateNotFoundError` when the gate does not exist.
        """
        conn = self._pool.get()
        gate = conn.execute(
            "SELECT id FROM quality_gates WHERE id = ?", (query.gate_id,)
        ).fetchone()
        if gate is None:
            raise QualityGateNotFoundError(
                detail=f"No quality gate has been found for id {query.gate_id}"
            )

        conditions: list[str] = []
        params: list[object] = [query.gate_id]

        if query.membership == MEMBERSHIP_SELECTED:
            conditions.append("pq.qgate_id IS NOT NULL")
        elif query.membership == MEMBERSHIP_DESELECTED:
            conditions.append("pq.qgate_id IS NULL")
        if query.project_search is not None:
            conditions.append("unicode_lower(p.name) LIKE ? ESCAPE '\\'")
            params.append(like_pattern(query.project_search))

        where_clause = ""
        if conditions:
            where_clause = "WHERE " + " AND ".join(conditions)

        from_clause = (
            "FROM projects p "
            "LEFT JOIN project_qgates pq "
            "ON pq.project_id = p.id AND pq.qgate_id = ?"
        )

        total: int = conn.execute(
            f"SELECT COUNT(*) AS cnt {from_clause} {where_clause}", params
        ).fetchone()["cnt"]

        rows = conn.execute(
            f"SELECT p.id, p.name, pq.qgate_id IS NOT NULL AS is_member "
            f"{from_clause} {where_clause} "
            f"ORDER BY unicode_lower(p.name), p.id LIMIT ? OFFSET ?",
            [*params, query.page_size, query.offset],
        ).fetchall()

        projects = [
            ProjectQgateAssociation(
                id=row["id"], name=row["name"], is_member=bool(row["is_member"])
            )
            for row in rows
        ]
        logger.debug(
            "Association search gate=%s membership=%s total=%d page=%d",
            query.gate_id, query.membership, total, query.page_index,
        )
        return Association(
            projects=projects,
            has_more_results=has_more_results(
                total, query.page_index, query.page_size
            ),
        )
