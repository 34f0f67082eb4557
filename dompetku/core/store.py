# dompetku/core/store.py
from typing import Any, Dict, List, Union

from supabase import create_client, Client

from dompetku.config import SUPABASE_URL, SUPABASE_KEY
from dompetku.core.errors import StoreError
from dompetku.utils.logging_setup import get_logger

logger = get_logger("dompetku.core.store")


def get_supabase_client() -> Client:
    """Kembalikan instance client Supabase."""
    return create_client(SUPABASE_URL, SUPABASE_KEY)


class RecordStore:
    """
    Akses CRUD generik ke tabel Supabase, selalu dibatasi ke satu user_id.
    Semua error dari client diteruskan sebagai StoreError dengan pesan aslinya.
    """

    def __init__(self, supabase_client: Client, user_id: str):
        if not user_id:
            raise ValueError("user_id wajib diisi")
        self.client = supabase_client
        self.user_id = user_id

    def _execute(self, collection: str, action: str, query) -> Any:
        try:
            return query.execute()
        except Exception as e:
            logger.error("Gagal %s data di tabel '%s': %s", action, collection, e)
            message = getattr(e, "message", None) or str(e)
            raise StoreError(message, collection=collection) from e

    def find(self,
             collection: str,
             filters: Union[Dict[str, Any], None] = None,
             select: str = "*",
             order: Union[str, None] = None,
             desc: bool = False,
             limit: Union[int, None] = None,
             gte: Union[Dict[str, Any], None] = None,
             lte: Union[Dict[str, Any], None] = None,
             ilike: Union[Dict[str, str], None] = None) -> List[Dict[str, Any]]:
        query = self.client.table(collection).select(select).eq("user_id", self.user_id)
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        for column, value in (gte or {}).items():
            query = query.gte(column, value)
        for column, value in (lte or {}).items():
            query = query.lte(column, value)
        for column, pattern in (ilike or {}).items():
            query = query.ilike(column, f"%{pattern}%")
        if order:
            query = query.order(order, desc=desc)
        if limit:
            query = query.limit(limit)
        response = self._execute(collection, "mengambil", query)
        return response.data or []

    def insert(self, collection: str, row: Dict[str, Any]) -> Dict[str, Any]:
        payload = dict(row)
        payload["user_id"] = self.user_id
        response = self._execute(collection, "menambah", self.client.table(collection).insert(payload))
        if not response.data:
            return payload
        return response.data[0]

    def update(self, collection: str, record_id: str, patch: Dict[str, Any]) -> List[Dict[str, Any]]:
        query = self.client.table(collection).update(patch).eq("id", record_id).eq("user_id", self.user_id)
        response = self._execute(collection, "mengubah", query)
        return response.data or []

    def delete(self, collection: str, record_id: str) -> None:
        query = self.client.table(collection).delete().eq("id", record_id).eq("user_id", self.user_id)
        self._execute(collection, "menghapus", query)

    def delete_where(self, collection: str, filters: Dict[str, Any]) -> None:
        query = self.client.table(collection).delete().eq("user_id", self.user_id)
        for column, value in filters.items():
            query = query.eq(column, value)
        self._execute(collection, "menghapus", query)
