# Copyright (c) 2025 Trae AI. All rights reserved.

import sqlite3
from pathlib import Path


class Database:
    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._init_db()

    def _init_db(self):
        # Allow using :memory: for testing, which is not a path
        if str(self.db_path) != ":memory:" and not Path(self.db_path).parent.exists():
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        with self.get_connection() as conn:
            # 1. library_items table
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS library_items (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    container_path TEXT NOT NULL,
                    media_type TEXT DEFAULT 'Video',
                    kind TEXT DEFAULT 'Movie',
                    provider_ids TEXT DEFAULT '{}',
                    remote_trailers TEXT DEFAULT '[]',
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
                """
            )

            # 2. operation_logs table
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS operation_logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    action_type TEXT,
                    target TEXT,
                    details TEXT
                )
                """
            )
            conn.commit()

    def get_connection(self):
        # An in-memory database only lives as long as its connection
        if str(self.db_path) == ":memory:":
            if not hasattr(self, "_memory_conn"):
                self._memory_conn = sqlite3.connect(":memory:", check_same_thread=False)
                self._memory_conn.row_factory = sqlite3.Row
            return self._memory_conn

        conn = sqlite3.connect(self.db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn
