"""Database schema initialization for the quality gates service."""
from __future__ import annotations

from src.shared.db.connection import ConnectionPool


def init_quality_gates_db(pool: ConnectionPool) -> None:
    """Initialize the Quality Gates service database schema.

    ``project_qgates`` holds at most one gate per project; a project with no
    row there is *deselected* for every gate.
    """
    conn = pool.get()
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS quality_gates (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        );

        CREATE TABLE IF NOT EXISTS quality_gate_conditions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            qgate_id INTEGER NOT NULL
                REFERENCES quality_gates(id) ON DELETE CASCADE,
            metric_key TEXT NOT NULL,
            operator TEXT NOT NULL
                CHECK(operator IN ('EQ','NE','LT','GT')),
            warning_threshold TEXT,
            error_threshold TEXT,
            period INTEGER,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        );
        CREATE INDEX IF NOT EXISTS idx_qgc_gate ON quality_gate_conditions(qgate_id);

        CREATE TABLE IF NOT EXISTS projects (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            created_at TEXT NOT NULL DEFAULT (datetime('now'))
        );
        CREATE INDEX IF NOT EXISTS idx_projects_name ON projects(name COLLATE NOCASE);

        CREATE TABLE IF NOT EXISTS project_qgates (
            project_id INTEGER PRIMARY KEY
                REFERENCES projects(id) ON DELETE CASCADE,
            qgate_id INTEGER NOT NULL
                REFERENCES quality_gates(id) ON DELETE CASCADE
        );
        CREATE INDEX IF NOT EXISTS idx_pqg_gate ON project_qgates(qgate_id);

        CREATE TABLE IF NOT EXISTS properties (
            prop_key TEXT PRIMARY KEY,
            text_value TEXT
        );
    """)
    conn.commit()
