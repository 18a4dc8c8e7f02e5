"""Quality gate store -- CRUD on gates, conditions and project associations."""
from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from src.shared.constants import (
    CONDITION_OPERATORS,
    DEFAULT_GATE_PROPERTY,
    MAX_GATE_NAME_LENGTH,
    MAX_PERIOD,
    MIN_PERIOD,
)
from src.shared.db.connection import ConnectionPool
from src.shared.errors import (
    ConditionNotFoundError,
    ConflictError,
    ProjectNotFoundError,
    QualityGateNotFoundError,
    ValidationError,
)
from src.shared.models.qualitygates import (
    ConditionOperator,
    QualityGate,
    QualityGateCondition,
)
from src.shared.utils import now_iso

logger = logging.getLogger(__name__)


class QualityGateStore:
    """Manages the ``quality_gates`` family of SQLite tables."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _row_to_gate(row: sqlite3.Row) -> QualityGate:
        return QualityGate(
            id=row["id"],
            name=row["name"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @staticmethod
    def _row_to_condition(row: sqlite3.Row) -> QualityGateCondition:
        return QualityGateCondition(
            id=row["id"],
            gate_id=row["qgate_id"],
            metric_key=row["metric_key"],
            operator=ConditionOperator(row["operator"]),
            warning_threshold=row["warning_threshold"],
            error_threshold=row["error_threshold"],
            period=row["period"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _validate_name(self, name: str | None, gate_id: int | None = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError(detail="Name can't be empty")
        if len(name) > MAX_GATE_NAME_LENGTH:
            raise ValidationError(
                detail=f"Name is too long (maximum is {MAX_GATE_NAME_LENGTH} characters)"
            )
        row = self._pool.get().execute(
            "SELECT id FROM quality_gates WHERE name = ?", (name,)
        ).fetchone()
        if row is not None and row["id"] != gate_id:
            raise ConflictError(detail=f"Name '{name}' has already been taken")
        return name

    @contextmanager
    def _gate_name_write(self, name: str) -> Iterator[sqlite3.Connection]:
        """Transaction for a write that sets a gate name.

        A concurrent writer may take *name* between the check in
        :meth:`_validate_name` and this write; the UNIQUE constraint then
        fails and is reported as :class:`ConflictError`.
        """
        try:
            with self._pool.transaction() as conn:
                yield conn
        except sqlite3.IntegrityError:
            raise ConflictError(
                detail=f"Name '{name}' has already been taken"
            ) from None

    @staticmethod
    def _validate_condition(
        metric_key: str | None,
        operator: str | None,
        warning_threshold: str | None,
        error_threshold: str | None,
        period: int | None,
    ) -> tuple[str, str, str | None, str | None, int | None]:
        metric_key = (metric_key or "").strip()
        if not metric_key:
            raise ValidationError(detail="Metric can't be empty")
        if operator not in CONDITION_OPERATORS:
            raise ValidationError(
                detail=f"Operator must be one of {', '.join(CONDITION_OPERATORS)}"
            )
        warning_threshold = (warning_threshold or "").strip() or None
        error_threshold = (error_threshold or "").strip() or None
        if warning_threshold is None and error_threshold is None:
            raise ValidationError(
                detail="At least one threshold (warning, error) must be set"
            )
        if period is not None and not MIN_PERIOD <= period <= MAX_PERIOD:
            raise ValidationError(
                detail=f"Period must be between {MIN_PERIOD} and {MAX_PERIOD}"
            )
        return metric_key, operator, warning_threshold, error_threshold, period

    def _require_project(self, project_id: int) -> None:
        row = self._pool.get().execute(
            "SELECT id FROM projects WHERE id = ?", (project_id,)
        ).fetchone()
        if row is None:
            raise ProjectNotFoundError(
                detail=f"No project has been found for id {project_id}"
            )

    # ------------------------------------------------------------------
    # quality gates
    # ------------------------------------------------------------------

    def create(self, name: str) -> QualityGate:
        """Create a quality gate named *name*.

        Raises :class:`ValidationError` for an empty or too long name and
        :class:`ConflictError` when the name is already taken.
        """
        name = self._validate_name(name)
        now = now_iso()
        with self._gate_name_write(name) as conn:
            cursor = conn.execute(
                "INSERT INTO quality_gates (name, created_at, updated_at) "
                "VALUES (?, ?, ?)",
                (name, now, now),
            )
        logger.info("Quality gate created: id=%s name=%s", cursor.lastrowid, name)
        return self.get(cursor.lastrowid)

    def copy(self, source_id: int, name: str) -> QualityGate:
        """Create a gate named *name* carrying copies of *source_id*'s conditions."""
        self.get(source_id)
        name = self._validate_name(name)
        now = now_iso()
        with self._gate_name_write(name) as conn:
            cursor = conn.execute(
                "INSERT INTO quality_gates (name, created_at, updated_at) "
                "VALUES (?, ?, ?)",
                (name, now, now),
            )
            new_id = cursor.lastrowid
            conn.execute(
                """
                INSERT INTO quality_gate_conditions
                    (qgate_id, metric_key, operator, warning_threshold,
                     error_threshold, period, created_at, updated_at)
                SELECT ?, metric_key, operator, warning_threshold,
                       error_threshold, period, ?, ?
                FROM quality_gate_conditions
                WHERE qgate_id = ?
                ORDER BY id
                """,
                (new_id, now, now, source_id),
            )
        logger.info("Quality gate copied: source=%s id=%s name=%s", source_id, new_id, name)
        return self.get(new_id)

    def rename(self, gate_id: int, name: str) -> QualityGate:
        """Rename a gate.  Keeping its current name is allowed."""
        self.get(gate_id)
        name = self._validate_name(name, gate_id=gate_id)
        with self._gate_name_write(name) as conn:
            conn.execute(
                "UPDATE quality_gates SET name = ?, updated_at = ? WHERE id = ?",
                (name, now_iso(), gate_id),
            )
        return self.get(gate_id)

    def get(self, gate_id: int) -> QualityGate:
        """Return a gate by id.

        Raises :class:`QualityGateNotFoundError` when no matching row exists.
        """
        row = self._pool.get().execute(
            "SELECT * FROM quality_gates WHERE id = ?", (gate_id,)
        ).fetchone()
        if row is None:
            raise QualityGateNotFoundError(
                detail=f"No quality gate has been found for id {gate_id}"
            )
        return self._row_to_gate(row)

    def get_by_name(self, name: str) -> QualityGate:
        """Return a gate by exact name.

        Raises :class:`QualityGateNotFoundError` when no matching row exists.
        """
        row = self._pool.get().execute(
            "SELECT * FROM quality_gates WHERE name = ?", (name,)
        ).fetchone()
        if row is None:
            raise QualityGateNotFoundError(
                detail=f"No quality gate has been found for name {name}"
            )
        return self._row_to_gate(row)

    def list(self) -> list[QualityGate]:
        """Return every gate ordered by name."""
        rows = self._pool.get().execute(
            "SELECT * FROM quality_gates ORDER BY name, id"
        ).fetchall()
        return [self._row_to_gate(row) for row in rows]

    def delete(self, gate_id: int) -> None:
        """Delete a gate together with its conditions and project associations.

        The default gate setting is cleared when it pointed at this gate.
        """
        self.get(gate_id)
        with self._pool.transaction() as conn:
            conn.execute(
                "DELETE FROM properties WHERE prop_key = ? AND text_value = ?",
                (DEFAULT_GATE_PROPERTY, str(gate_id)),
            )
            conn.execute("DELETE FROM quality_gates WHERE id = ?", (gate_id,))
        logger.info("Quality gate deleted: id=%s", gate_id)

    def set_default(self, gate_id: int | None) -> None:
        """Make *gate_id* the default gate, or clear the default with ``None``."""
        if gate_id is None:
            with self._pool.transaction() as conn:
                conn.execute(
                    "DELETE FROM properties WHERE prop_key = ?",
                    (DEFAULT_GATE_PROPERTY,),
                )
            return
        self.get(gate_id)
        with self._pool.transaction() as conn:
            conn.execute(
                "INSERT INTO properties (prop_key, text_value) VALUES (?, ?) "
                "ON CONFLICT(prop_key) DO UPDATE SET text_value = excluded.text_value",
                (DEFAULT_GATE_PROPERTY, str(gate_id)),
            )

    def get_default(self) -> QualityGate | None:
        """Return the default gate, or ``None`` when none is set."""
        row = self._pool.get().execute(
            "SELECT text_value FROM properties WHERE prop_key = ?",
            (DEFAULT_GATE_PROPERTY,),
        ).fetchone()
        if row is None or row["text_value"] is None:
            return None
        return self.get(int(row["text_value"]))

    # ------------------------------------------------------------------
    # conditions
    # ------------------------------------------------------------------

    def create_condition(
        self,
        gate_id: int,
        metric_key: str,
        operator: str,
        warning_threshold: str | None = None,
        error_threshold: str | None = None,
        period: int | None = None,
    ) -> QualityGateCondition:
        """Attach a new condition to a gate."""
        self.get(gate_id)
        values = self._validate_condition(
            metric_key, operator, warning_threshold, error_threshold, period
        )
        now = now_iso()
        with self._pool.transaction() as conn:
            cursor = conn.execute(
                """
                INSERT INTO quality_gate_conditions
                    (qgate_id, metric_key, operator, warning_threshold,
                     error_threshold, period, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (gate_id, *values, now, now),
            )
        return self.get_condition(cursor.lastrowid)

    def update_condition(
        self,
        condition_id: int,
        metric_key: str,
        operator: str,
        warning_threshold: str | None = None,
        error_threshold: str | None = None,
        period: int | None = None,
    ) -> QualityGateCondition:
        """Replace every editable field of a condition."""
        self.get_condition(condition_id)
        values = self._validate_condition(
            metric_key, operator, warning_threshold, error_threshold, period
        )
        with self._pool.transaction() as conn:
            conn.execute(
                """
                UPDATE quality_gate_conditions
                SET metric_key = ?, operator = ?, warning_threshold = ?,
                    error_threshold = ?, period = ?, updated_at = ?
                WHERE id = ?
                """,
                (*values, now_iso(), condition_id),
            )
        return self.get_condition(condition_id)

    def get_condition(self, condition_id: int) -> QualityGateCondition:
        """Return a condition by id.

        Raises :class:`ConditionNotFoundError` when no matching row exists.
        """
        row = self._pool.get().execute(
            "SELECT * FROM quality_gate_conditions WHERE id = ?", (condition_id,)
        ).fetchone()
        if row is None:
            raise ConditionNotFoundError(
                detail=f"No quality gate condition has been found for id {condition_id}"
            )
        return self._row_to_condition(row)

    def delete_condition(self, condition_id: int) -> None:
        with self._pool.transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM quality_gate_conditions WHERE id = ?", (condition_id,)
            )
            if cursor.rowcount == 0:
                raise ConditionNotFoundError(
                    detail=f"No quality gate condition has been found for id {condition_id}"
                )

    def list_conditions(self, gate_id: int) -> list[QualityGateCondition]:
        """Return the conditions of a gate in creation order."""
        rows = self._pool.get().execute(
            "SELECT * FROM quality_gate_conditions WHERE qgate_id = ? ORDER BY id",
            (gate_id,),
        ).fetchall()
        return [self._row_to_condition(row) for row in rows]

    # ------------------------------------------------------------------
    # projects
    # ------------------------------------------------------------------

    def register_project(self, name: str) -> int:
        """Record a project so it can be associated with gates; return its id."""
        name = (name or "").strip()
        if not name:
            raise ValidationError(detail="Project name can't be empty")
        with self._pool.transaction() as conn:
            cursor = conn.execute(
                "INSERT INTO projects (name, created_at) VALUES (?, ?)",
                (name, now_iso()),
            )
        return cursor.lastrowid

    def associate_project(self, gate_id: int, project_id: int) -> None:
        """Select *gate_id* for a project, replacing any previous gate."""
        self.get(gate_id)
        self._require_project(project_id)
        with self._pool.transaction() as conn:
            conn.execute(
                "INSERT INTO project_qgates (project_id, qgate_id) VALUES (?, ?) "
                "ON CONFLICT(project_id) DO UPDATE SET qgate_id = excluded.qgate_id",
                (project_id, gate_id),
            )
        logger.info("Project associated: project=%s gate=%s", project_id, gate_id)

    def dissociate_project(self, gate_id: int, project_id: int) -> None:
        """Deselect *gate_id* for a project.  No-op when it was not selected."""
        self.get(gate_id)
        self._require_project(project_id)
        with self._pool.transaction() as conn:
            conn.execute(
                "DELETE FROM project_qgates WHERE project_id = ? AND qgate_id = ?",
                (project_id, gate_id),
            )
        logger.info("Project dissociated: project=%s gate=%s", project_id, gate_id)
