"""CSV / XLSX ledger export."""

from __future__ import annotations

import io
import uuid

import openpyxl

from kintai.schemas.payroll import StaffPeriodSummary
from kintai.services.report_export import LEDGER_COLUMNS, ledger_to_csv, ledger_to_xlsx


def _row(name: str, pin: str | None, minutes: int, hours: float, gross: int, tax: int) -> StaffPeriodSummary:
    return StaffPeriodSummary(
        staff_id=uuid.uuid4(),
        name=name,
        pin=pin,
        role="staff",
        hourly_wage=1000,
        total_minutes=minutes,
        total_hours=hours,
        gross_wage=gross,
        tax=tax,
        net_pay=gross - tax,
        worked_days=1,
    )


def test_csv_starts_with_bom_and_japanese_header():
    content = ledger_to_csv([_row("山田 太郎", "1001", 480, 8.0, 8_000, 0)])

    assert content.startswith(b"\xef\xbb\xbf")
    lines = content.decode("utf-8-sig").split("\n")
    assert lines[0] == "氏名,PIN,役割,総労働時間,時給,総支給額,源泉所得税"
    assert lines[1] == "山田 太郎,1001,staff,8.00,1000,8000,0"


def test_csv_hours_have_two_decimals():
    content = ledger_to_csv([_row("佐藤", "7", 125, 2.08, 2_083, 0)])
    assert ",2.08," in content.decode("utf-8-sig")


def test_csv_missing_pin_is_blank():
    content = ledger_to_csv([_row("鈴木", None, 60, 1.0, 1_000, 0)])
    assert content.decode("utf-8-sig").split("\n")[1].startswith("鈴木,,")


def test_csv_empty_ledger_has_header_only():
    text = ledger_to_csv([]).decode("utf-8-sig")
    assert text.strip() == ",".join(LEDGER_COLUMNS)


def test_xlsx_has_header_and_rows():
    content = ledger_to_xlsx(
        [_row("山田 太郎", "1001", 480, 8.0, 8_000, 0), _row("佐藤", "1002", 60, 1.0, 1_000, 0)],
        sheet_name="2026-10",
    )
    wb = openpyxl.load_workbook(io.BytesIO(content))
    ws = wb["2026-10"]
    rows = list(ws.iter_rows(values_only=True))

    assert list(rows[0]) == LEDGER_COLUMNS
    assert rows[1][0] == "山田 太郎"
    assert rows[1][5] == 8_000
    assert len(rows) == 3
