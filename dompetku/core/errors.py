# dompetku/core/errors.py


class DompetkuError(Exception):
    """Error dasar aplikasi."""


class ValidationError(DompetkuError):
    """Input ditolak sebelum ada penulisan ke database (field kosong, jumlah <= 0)."""


class StoreError(DompetkuError):
    """Operasi Supabase gagal. Pesan asli diteruskan apa adanya."""

    def __init__(self, message: str, collection: str = None):
        super().__init__(message)
        self.message = message
        self.collection = collection
