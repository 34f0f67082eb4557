import unittest
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, call
from supabase import Client  # untuk spec mock

from dompetku.core import db
from dompetku.core.errors import StoreError
from dompetku.core.models import KategoriTipe, Rekening, Sumber, Transaction
from dompetku.core.store import RecordStore


class TestRecordStore(unittest.TestCase):
    def setUp(self):
        # Mock client Supabase untuk semua test
        self.mock_supabase_client = MagicMock(spec=Client)

        # Hasil dari .execute()
        self.mock_execute = MagicMock(data=[])

        # Objek yang dikembalikan .table("..."); semua method bisa dirantai
        self.mock_table_methods = MagicMock()
        for method in ("insert", "select", "update", "delete", "eq", "gte", "lte", "ilike", "order", "limit"):
            getattr(self.mock_table_methods, method).return_value = self.mock_table_methods
        self.mock_table_methods.execute.return_value = self.mock_execute

        self.mock_supabase_client.table.return_value = self.mock_table_methods

        self.store = RecordStore(self.mock_supabase_client, "user-1")

    def test_requires_user_id(self):
        with self.assertRaises(ValueError):
            RecordStore(self.mock_supabase_client, "")

    def test_find_is_scoped_to_user(self):
        self.mock_execute.data = [{"id": "1", "nama": "Makanan"}]

        rows = self.store.find("kategori", filters={"tipe": "pengeluaran"}, order="nama")

        self.assertEqual(rows, [{"id": "1", "nama": "Makanan"}])
        self.mock_supabase_client.table.assert_called_with("kategori")
        self.mock_table_methods.select.assert_called_once_with("*")
        self.assertEqual(
            self.mock_table_methods.eq.call_args_list,
            [call("user_id", "user-1"), call("tipe", "pengeluaran")],
        )
        self.mock_table_methods.order.assert_called_once_with("nama", desc=False)
        self.mock_table_methods.limit.assert_not_called()

    def test_find_with_ranges_and_patterns(self):
        self.store.find(
            "pengeluaran",
            gte={"tanggal": "2024-01-01"},
            lte={"tanggal": "2024-01-31"},
            ilike={"keterangan": "makan"},
            order="tanggal",
            desc=True,
            limit=5,
        )

        self.mock_table_methods.gte.assert_called_once_with("tanggal", "2024-01-01")
        self.mock_table_methods.lte.assert_called_once_with("tanggal", "2024-01-31")
        self.mock_table_methods.ilike.assert_called_once_with("keterangan", "%makan%")
        self.mock_table_methods.order.assert_called_once_with("tanggal", desc=True)
        self.mock_table_methods.limit.assert_called_once_with(5)

    def test_find_returns_empty_list_when_no_data(self):
        self.mock_execute.data = None
        self.assertEqual(self.store.find("goals"), [])

    def test_insert_adds_user_id(self):
        self.mock_execute.data = [{"id": "9", "nama": "Liburan", "user_id": "user-1"}]

        row = self.store.insert("goals", {"nama": "Liburan"})

        self.assertEqual(row["id"], "9")
        args, _kwargs = self.mock_table_methods.insert.call_args
        self.assertEqual(args[0], {"nama": "Liburan", "user_id": "user-1"})

    def test_insert_without_returned_rows_gives_payload(self):
        self.mock_execute.data = []
        row = self.store.insert("goals", {"nama": "Liburan"})
        self.assertEqual(row, {"nama": "Liburan", "user_id": "user-1"})

    def test_update_filters_by_id_and_user(self):
        self.store.update("hutang", "5", {"status": "lunas"})

        self.mock_table_methods.update.assert_called_once_with({"status": "lunas"})
        self.assertEqual(
            self.mock_table_methods.eq.call_args_list,
            [call("id", "5"), call("user_id", "user-1")],
        )

    def test_delete_where(self):
        self.store.delete_where("pembayaran_hutang", {"hutang_id": "5"})

        self.mock_table_methods.delete.assert_called_once()
        self.assertEqual(
            self.mock_table_methods.eq.call_args_list,
            [call("user_id", "user-1"), call("hutang_id", "5")],
        )

    def test_client_error_becomes_store_error(self):
        self.mock_table_methods.execute.side_effect = Exception("connection reset")

        with self.assertRaises(StoreError) as ctx:
            self.store.find("hutang")

        self.assertEqual(ctx.exception.message, "connection reset")
        self.assertEqual(ctx.exception.collection, "hutang")

    def test_store_error_keeps_backend_message(self):
        error = Exception("APIError")
        error.message = 'duplicate key value violates unique constraint "kategori_nama_key"'
        self.mock_table_methods.execute.side_effect = error

        with self.assertRaises(StoreError) as ctx:
            self.store.insert("kategori", {"nama": "Makanan"})

        self.assertIn("duplicate key", str(ctx.exception))


class TestDatabase(unittest.TestCase):
    def setUp(self):
        self.store = MagicMock(spec=RecordStore)
        self.store.find.return_value = []

    def test_get_expenses_embeds_category_and_reads_legacy_bank(self):
        self.store.find.return_value = [
            {"id": "1", "tanggal": "2024-03-05", "jumlah": 25000, "keterangan": "DANA - Makan siang",
             "sumber": "Debit", "kategori_id": "k1", "kategori": {"nama": "Makanan"}},
            {"id": "2", "tanggal": "2024-03-04T10:00:00", "jumlah": "15000.50", "keterangan": "Parkir",
             "sumber": "Cash", "kategori_id": None, "kategori": None},
        ]

        expenses = db.get_transactions(self.store, KategoriTipe.PENGELUARAN,
                                       start=date(2024, 3, 1), end=date(2024, 3, 31))

        _args, kwargs = self.store.find.call_args
        self.assertEqual(self.store.find.call_args[0][0], "pengeluaran")
        self.assertEqual(kwargs["select"], "*, kategori(nama)")
        self.assertEqual(kwargs["gte"], {"tanggal": "2024-03-01"})
        self.assertEqual(kwargs["lte"], {"tanggal": "2024-03-31"})

        self.assertEqual(expenses[0].rekening, Rekening.DANA)
        self.assertEqual(expenses[0].kategori_nama, "Makanan")
        self.assertEqual(expenses[0].jumlah, Decimal("25000"))
        self.assertIsNone(expenses[1].rekening)
        self.assertEqual(expenses[1].tanggal, date(2024, 3, 4))
        self.assertEqual(expenses[1].jumlah, Decimal("15000.50"))

    def test_get_income_uses_plain_select(self):
        db.get_transactions(self.store, KategoriTipe.PEMASUKAN)
        _args, kwargs = self.store.find.call_args
        self.assertEqual(kwargs["select"], "*")
        self.assertIsNone(kwargs["gte"])
        self.assertIsNone(kwargs["ilike"])

    def test_search_transactions_by_memo(self):
        db.get_transactions(self.store, KategoriTipe.PENGELUARAN, search="seabank")
        _args, kwargs = self.store.find.call_args
        self.assertEqual(kwargs["ilike"], {"keterangan": "seabank"})

    def test_add_transaction_row(self):
        self.store.insert.return_value = {
            "id": "7", "tanggal": "2024-03-05", "jumlah": 50000, "keterangan": "Gaji",
            "sumber": "Debit", "rekening": "BTN",
        }
        transaction = Transaction(
            id=None, tipe=KategoriTipe.PEMASUKAN, tanggal=date(2024, 3, 5), jumlah=Decimal("50000"),
            keterangan="Gaji", sumber=Sumber.DEBIT, rekening=Rekening.BTN,
        )

        stored = db.add_transaction(self.store, transaction)

        collection, row = self.store.insert.call_args[0]
        self.assertEqual(collection, "pemasukan")
        self.assertEqual(row["jumlah"], 50000)
        self.assertEqual(row["rekening"], "BTN")
        self.assertNotIn("kategori_id", row)
        self.assertEqual(stored.id, "7")
        self.assertEqual(stored.rekening, Rekening.BTN)

    def test_delete_debt_removes_payments_first(self):
        db.delete_debt(self.store, "5")

        self.store.delete_where.assert_called_once_with("pembayaran_hutang", {"hutang_id": "5"})
        self.store.delete.assert_called_once_with("hutang", "5")

    def test_get_goal_not_found(self):
        self.assertIsNone(db.get_goal(self.store, "404"))


if __name__ == "__main__":
    unittest.main()
