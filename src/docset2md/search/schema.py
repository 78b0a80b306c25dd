"""SQLite schema for the portable ``search.db`` artifact."""

from __future__ import annotations

import sqlite3


INSERT_ENTRY_SQL = """
    INSERT INTO entries(name, type, language, framework, path, abstract, declaration, deprecated, beta)
    VALUES(?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


def ensure_schema(connection: sqlite3.Connection) -> None:
    """Create the entries table, FTS index, and sync triggers if missing."""

    connection.executescript(
        """
        CREATE TABLE IF NOT EXISTS entries (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            type TEXT NOT NULL,
            language TEXT,
            framework TEXT,
            path TEXT NOT NULL,
            abstract TEXT,
            declaration TEXT,
            deprecated INTEGER NOT NULL DEFAULT 0,
            beta INTEGER NOT NULL DEFAULT 0
        );

        CREATE VIRTUAL TABLE IF NOT EXISTS entries_fts USING fts5(
            name,
            type,
            framework,
            abstract,
            declaration,
            content='entries',
            content_rowid='id'
        );

        CREATE INDEX IF NOT EXISTS idx_entries_type ON entries(type);
        CREATE INDEX IF NOT EXISTS idx_entries_framework ON entries(framework);
        CREATE INDEX IF NOT EXISTS idx_entries_language ON entries(language);

        CREATE TRIGGER IF NOT EXISTS entries_ai AFTER INSERT ON entries BEGIN
            INSERT INTO entries_fts(rowid, name, type, framework, abstract, declaration)
            VALUES (new.id, new.name, new.type, new.framework, new.abstract, new.declaration);
        END;

        CREATE TRIGGER IF NOT EXISTS entries_ad AFTER DELETE ON entries BEGIN
            INSERT INTO entries_fts(entries_fts, rowid, name, type, framework, abstract, declaration)
            VALUES ('delete', old.id, old.name, old.type, old.framework, old.abstract, old.declaration);
        END;

        CREATE TRIGGER IF NOT EXISTS entries_au AFTER UPDATE ON entries BEGIN
            INSERT INTO entries_fts(entries_fts, rowid, name, type, framework, abstract, declaration)
            VALUES ('delete', old.id, old.name, old.type, old.framework, old.abstract, old.declaration);
            INSERT INTO entries_fts(rowid, name, type, framework, abstract, declaration)
            VALUES (new.id, new.name, new.type, new.framework, new.abstract, new.declaration);
        END;
        """
    )


def optimize_fts(connection: sqlite3.Connection) -> None:
    """Run FTS optimize maintenance command."""

    connection.execute("INSERT INTO entries_fts(entries_fts) VALUES ('optimize');")
