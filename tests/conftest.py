"""
Pytest configuration for local imports and shared fixtures.
"""

# Standard Library
import os
import pathlib
import sys

# PIP3 modules
import openpyxl
import pytest

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()


#============================================
def write_sheet(path: pathlib.Path, rows: list[list]) -> pathlib.Path:
	"""
	Write rows to the first sheet of a new XLSX file.

	Args:
		path: Output path.
		rows: Row lists; None leaves a cell blank.

	Returns:
		The written path.
	"""
	workbook = openpyxl.Workbook()
	worksheet = workbook.active
	for row_index, row in enumerate(rows, start=1):
		for col_index, value in enumerate(row, start=1):
			if value is None:
				continue
			worksheet.cell(row=row_index, column=col_index, value=value)
	workbook.save(path)
	return path


#============================================
@pytest.fixture
def order_sheet(tmp_path: pathlib.Path) -> pathlib.Path:
	"""
	A small order sheet with a title row above the header row.
	"""
	rows = [
		["2026 秋季采购", None, None, None, None],
		["产品名称", "订单编号", "货号", "数量", "批次"],
		["T-Shirt", "PO-001", "TS-01", 12000, "B1"],
		["Hat", "PO-002", "HT-02", 300, None],
	]
	return write_sheet(tmp_path / "orders.xlsx", rows)
