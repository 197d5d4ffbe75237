# Copyright (c) 2025 Trae AI. All rights reserved.

import json
import sqlite3
from typing import List, Optional, Dict
from pathlib import Path
from trailer_helper.core.exceptions import CatalogError
from trailer_helper.core.models import ItemKind, MediaItem, MediaType
from .database import Database


class LibraryRepository:
    """
    SQLite backed media catalog.
    """

    def __init__(self, db: Database):
        self.db = db

    def save(self, item: MediaItem) -> MediaItem:
        """
        Inserts a new item or updates an existing one (by id).
        """
        values = (
            item.name,
            str(item.container_path),
            item.media_type.value,
            item.kind.value,
            json.dumps(item.provider_ids, ensure_ascii=False),
            json.dumps(item.remote_trailers, ensure_ascii=False),
        )
        with self.db.get_connection() as conn:
            if item.id is None:
                cursor = conn.execute(
                    """
                    INSERT INTO library_items
                    (name, container_path, media_type, kind, provider_ids, remote_trailers)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    values,
                )
                item.id = cursor.lastrowid
            else:
                conn.execute(
                    """
                    UPDATE library_items
                    SET name = ?, container_path = ?, media_type = ?, kind = ?, provider_ids = ?, remote_trailers = ?
                    WHERE id = ?
                    """,
                    values + (item.id,),
                )
            conn.commit()
        return item

    def get(self, item_id: int) -> Optional[MediaItem]:
        with self.db.get_connection() as conn:
            cursor = conn.execute("SELECT * FROM library_items WHERE id = ?", (item_id,))
            row = cursor.fetchone()
            return self._to_item(row) if row else None

    def get_all(self) -> List[MediaItem]:
        with self.db.get_connection() as conn:
            cursor = conn.execute("SELECT * FROM library_items ORDER BY id")
            return [self._to_item(row) for row in cursor.fetchall()]

    def delete(self, item_id: int):
        with self.db.get_connection() as conn:
            conn.execute("DELETE FROM library_items WHERE id = ?", (item_id,))
            conn.commit()

    def query_items(self, media_type: MediaType, kind: ItemKind, has_provider_id: str) -> List[MediaItem]:
        """
        Items of the given type and kind whose provider ids contain the key,
        whatever its value.
        """
        try:
            with self.db.get_connection() as conn:
                cursor = conn.execute(
                    "SELECT * FROM library_items WHERE media_type = ? AND kind = ? ORDER BY id",
                    (media_type.value, kind.value),
                )
                rows = cursor.fetchall()
            items = [self._to_item(row) for row in rows]
        except (sqlite3.Error, ValueError) as e:
            raise CatalogError(f"Failed to query library items: {e}") from e

        return [item for item in items if has_provider_id in item.provider_ids]

    @staticmethod
    def _to_item(row: sqlite3.Row) -> MediaItem:
        return MediaItem(
            id=row["id"],
            name=row["name"],
            container_path=Path(row["container_path"]),
            media_type=MediaType(row["media_type"]),
            kind=ItemKind(row["kind"]),
            provider_ids=json.loads(row["provider_ids"] or "{}"),
            remote_trailers=json.loads(row["remote_trailers"] or "[]"),
        )


class LogRepository:
    def __init__(self, db: Database):
        self.db = db

    def add(self, action_type: str, target: str, details: str = None):
        with self.db.get_connection() as conn:
            conn.execute(
                "INSERT INTO operation_logs (action_type, target, details) VALUES (?, ?, ?)",
                (action_type, target, details)
            )
            conn.commit()

    def get_recent(self, limit: int = 100) -> List[Dict]:
        with self.db.get_connection() as conn:
            cursor = conn.execute(
                "SELECT * FROM operation_logs ORDER BY timestamp DESC, id DESC LIMIT ?",
                (limit,)
            )
            return [dict(row) for row in cursor.fetchall()]
