"""
Spreadsheet input: read the first sheet of an XLSX/XLS file into a sparse grid.
"""

# Standard Library
import asyncio
import dataclasses
import datetime
import io
import pathlib

# PIP3 modules
import openpyxl
import xlrd

# local repo modules
import order_label_generator as olg
import order_label_generator.config
import order_label_generator.errors


SourceReadError = olg.errors.SourceReadError

DEFAULT_GRID_ROWS = olg.config.DEFAULT_GRID_ROWS
DEFAULT_GRID_COLUMNS = olg.config.DEFAULT_GRID_COLUMNS
SUPPORTED_EXTENSIONS = olg.config.SUPPORTED_EXTENSIONS


@dataclasses.dataclass(frozen=True)
class CellGrid:
	"""
	Sparse cell grid with inclusive 0-based bounds.
	Absent cells are empty.
	"""
	cells: dict[tuple[int, int], str]
	min_row: int = 0
	min_col: int = 0
	max_row: int = DEFAULT_GRID_ROWS - 1
	max_col: int = DEFAULT_GRID_COLUMNS - 1

	def get(self, row: int, col: int) -> str:
		return self.cells.get((row, col), "")


#============================================
def format_cell_value(value) -> str:
	"""
	Convert a raw cell value to trimmed text.

	Falsy cell values (numeric 0 and False) read as blank, the same as an
	empty cell, for header scanning and the blank-run lookahead.

	Args:
		value: Cell value from openpyxl or xlrd.

	Returns:
		Text value, empty string for blank cells.
	"""
	if value is None:
		return ""
	if isinstance(value, bool):
		if not value:
			return ""
		return "true"
	if isinstance(value, (int, float)) and value == 0:
		return ""
	if isinstance(value, float) and value.is_integer():
		return str(int(value))
	if isinstance(value, datetime.datetime) and value.time() == datetime.time(0, 0):
		return value.date().isoformat()
	return str(value).strip()


#============================================
def build_grid(
	rows: list[list],
	row_offset: int = 0,
	col_offset: int = 0,
) -> CellGrid:
	"""
	Build a grid from nested row lists.

	Args:
		rows: Row lists of raw values; shorter rows are padded with blanks.
		row_offset: Row index of the first list.
		col_offset: Column index of the first value in each row.

	Returns:
		CellGrid bounded by the data, or the fallback window when there is none.
	"""
	cells: dict[tuple[int, int], str] = {}
	width = 0
	for row_index, row in enumerate(rows):
		width = max(width, len(row))
		for col_index, value in enumerate(row):
			text = format_cell_value(value)
			if text:
				cells[(row_offset + row_index, col_offset + col_index)] = text
	if not rows or width == 0:
		return CellGrid(cells=cells)
	return CellGrid(
		cells=cells,
		min_row=row_offset,
		min_col=col_offset,
		max_row=row_offset + len(rows) - 1,
		max_col=col_offset + width - 1,
	)


#============================================
def _read_xlsx(data: bytes) -> CellGrid:
	workbook = openpyxl.load_workbook(io.BytesIO(data), data_only=True)
	try:
		worksheet = workbook.worksheets[0]
		if worksheet.max_row is None or worksheet.max_column is None:
			rows = [list(row) for row in worksheet.iter_rows(values_only=True)]
			return build_grid(rows)
		rows = [
			list(row)
			for row in worksheet.iter_rows(
				min_row=worksheet.min_row,
				max_row=worksheet.max_row,
				min_col=worksheet.min_column,
				max_col=worksheet.max_column,
				values_only=True,
			)
		]
		return build_grid(rows, worksheet.min_row - 1, worksheet.min_column - 1)
	finally:
		workbook.close()


#============================================
def _read_xls(data: bytes) -> CellGrid:
	book = xlrd.open_workbook(file_contents=data)
	sheet = book.sheet_by_index(0)
	rows: list[list] = []
	for row_index in range(sheet.nrows):
		row = []
		for col_index in range(sheet.ncols):
			cell = sheet.cell(row_index, col_index)
			if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
				row.append(None)
			elif cell.ctype == xlrd.XL_CELL_BOOLEAN:
				row.append(bool(cell.value))
			else:
				row.append(cell.value)
		rows.append(row)
	return build_grid(rows)


#============================================
def read_grid_bytes(data: bytes, filename: str) -> CellGrid:
	"""
	Read spreadsheet bytes into a grid.

	Args:
		data: File contents.
		filename: Original file name, used to pick the reader.

	Returns:
		CellGrid of the first sheet.
	"""
	suffix = pathlib.Path(filename).suffix.lower()
	if suffix not in SUPPORTED_EXTENSIONS:
		raise SourceReadError("请选择 Excel 文件（.xlsx 或 .xls 格式）")
	try:
		if suffix == ".xls":
			return _read_xls(data)
		return _read_xlsx(data)
	except Exception as error:
		raise SourceReadError(f"Excel文件解析失败: {error}") from error


#============================================
def read_grid(path: pathlib.Path) -> CellGrid:
	"""
	Read a spreadsheet file into a grid.

	Args:
		path: XLSX or XLS path.

	Returns:
		CellGrid of the first sheet.
	"""
	path = pathlib.Path(path)
	try:
		data = path.read_bytes()
	except OSError as error:
		raise SourceReadError(f"文件读取失败: {path}") from error
	return read_grid_bytes(data, path.name)


#============================================
async def read_grid_async(path: pathlib.Path) -> CellGrid:
	"""
	Read a spreadsheet without blocking the event loop.
	Cancelling the awaiting task discards the pending result.

	Args:
		path: XLSX or XLS path.

	Returns:
		CellGrid of the first sheet.
	"""
	return await asyncio.to_thread(read_grid, path)
