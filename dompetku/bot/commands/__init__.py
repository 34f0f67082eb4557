# dompetku/bot/commands/__init__.py

from .utils import start_command, help_command
from .saldo import saldo_command, grafik_pengeluaran_command
from .transaksi import pemasukan_command, pengeluaran_command
from .hutang import (
    bayar_command,
    cicilan_command,
    hapus_bayar_command,
    hutang_command,
    tambah_hutang_command,
)
from .tabungan import (
    hapus_tabungan_command,
    nabung_command,
    tabungan_command,
    tambah_target_command,
    target_command,
    ubah_tabungan_command,
)
from .notifikasi import notifikasi_command

# Nama perintah Telegram -> handler
ALL_COMMANDS = {
    "start": start_command,
    "help": help_command,
    "saldo": saldo_command,
    "grafik_pengeluaran": grafik_pengeluaran_command,
    "pemasukan": pemasukan_command,
    "pengeluaran": pengeluaran_command,
    "hutang": hutang_command,
    "tambah_hutang": tambah_hutang_command,
    "bayar": bayar_command,
    "hapus_bayar": hapus_bayar_command,
    "cicilan": cicilan_command,
    "target": target_command,
    "tambah_target": tambah_target_command,
    "nabung": nabung_command,
    "ubah_tabungan": ubah_tabungan_command,
    "hapus_tabungan": hapus_tabungan_command,
    "tabungan": tabungan_command,
    "notifikasi": notifikasi_command,
}
