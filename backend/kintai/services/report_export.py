"""
Ledger export for spreadsheets.

CSV: UTF-8 with BOM so that Excel opens the Japanese headers correctly.
XLSX: the same table written through the openpyxl engine.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Sequence

import pandas as pd

from kintai.schemas.payroll import StaffPeriodSummary

logger = logging.getLogger(__name__)

UTF8_BOM = "\ufeff"

LEDGER_COLUMNS: list[str] = [
    "氏名",
    "PIN",
    "役割",
    "総労働時間",
    "時給",
    "総支給額",
    "源泉所得税",
]


def ledger_frame(entries: Sequence[StaffPeriodSummary]) -> pd.DataFrame:
    rows = [
        {
            "氏名": e.name,
            "PIN": e.pin or "",
            "役割": e.role or "",
            "総労働時間": e.total_hours,
            "時給": e.hourly_wage,
            "総支給額": e.gross_wage,
            "源泉所得税": e.tax,
        }
        for e in entries
    ]
    return pd.DataFrame(rows, columns=LEDGER_COLUMNS)


def ledger_to_csv(entries: Sequence[StaffPeriodSummary]) -> bytes:
    df = ledger_frame(entries)
    # Hours always carry two decimals in the file, e.g. 8.00
    df["総労働時間"] = df["総労働時間"].map(lambda h: f"{h:.2f}")
    text = df.to_csv(index=False, lineterminator="\n")
    logger.info("CSV ledger export: rows=%d", len(df))
    return (UTF8_BOM + text).encode("utf-8")


def ledger_to_xlsx(entries: Sequence[StaffPeriodSummary], sheet_name: str) -> bytes:
    df = ledger_frame(entries)
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    logger.info("XLSX ledger export: sheet=%s rows=%d", sheet_name, len(df))
    return buf.getvalue()
