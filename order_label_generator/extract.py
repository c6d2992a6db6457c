"""
Locate keyword headers in a loosely formatted grid and build product records.
"""

# local repo modules
import order_label_generator as olg
import order_label_generator.config
import order_label_generator.errors
import order_label_generator.sheet_reader


CellGrid = olg.sheet_reader.CellGrid
HeaderPosition = olg.config.HeaderPosition
ProductRecord = olg.config.ProductRecord
SchemaError = olg.errors.SchemaError
EmptyResultError = olg.errors.EmptyResultError

COLUMN_KEYWORDS = olg.config.COLUMN_KEYWORDS
FIELD_NAMES = olg.config.FIELD_NAMES
LOOKAHEAD_ROWS = olg.config.LOOKAHEAD_ROWS


#============================================
def find_header(grid: CellGrid, keywords: tuple[str, ...]) -> HeaderPosition | None:
	"""
	Find the first cell, in row-major order, containing any keyword.

	Args:
		grid: Cell grid.
		keywords: Header synonyms, matched as case-sensitive substrings.

	Returns:
		HeaderPosition or None if nothing matched.
	"""
	for row in range(grid.min_row, grid.max_row + 1):
		for col in range(grid.min_col, grid.max_col + 1):
			value = grid.get(row, col).strip()
			if not value:
				continue
			for keyword in keywords:
				if keyword in value:
					return HeaderPosition(row=row, col=col)
	return None


#============================================
def locate_headers(
	grid: CellGrid,
	keyword_sets: dict[str, tuple[str, ...]] | None = None,
) -> dict[str, HeaderPosition | None]:
	"""
	Locate the header cell of every field.

	Args:
		grid: Cell grid.
		keyword_sets: Field name to header synonyms.

	Returns:
		Field name to HeaderPosition (None when not found).
	"""
	if keyword_sets is None:
		keyword_sets = COLUMN_KEYWORDS
	positions: dict[str, HeaderPosition | None] = {}
	for field_name, keywords in keyword_sets.items():
		positions[field_name] = find_header(grid, keywords)
	return positions


#============================================
def _has_value_ahead(grid: CellGrid, col: int, row: int) -> bool:
	last_row = min(row + LOOKAHEAD_ROWS, grid.max_row)
	for check_row in range(row + 1, last_row + 1):
		if grid.get(check_row, col).strip():
			return True
	return False


#============================================
def extract_column(grid: CellGrid, header: HeaderPosition) -> list[str]:
	"""
	Read the values below a header cell.

	A blank cell after data has started ends the column unless one of the
	next LOOKAHEAD_ROWS rows holds a value, in which case the blank is kept
	as a placeholder.

	Args:
		grid: Cell grid.
		header: Header cell position.

	Returns:
		List of cell texts.
	"""
	values: list[str] = []
	for row in range(header.row + 1, grid.max_row + 1):
		value = grid.get(row, header.col).strip()
		if not value and values:
			if not _has_value_ahead(grid, header.col, row):
				break
		values.append(value)
	return values


#============================================
def parse_quantity(value: str) -> int:
	"""
	Parse a quantity cell, falling back to 0.

	Leading digits are used the way a lenient integer parse reads them,
	so "300件" gives 300 and "12.5" gives 12.

	Args:
		value: Cell text.

	Returns:
		Non-negative integer quantity.
	"""
	text = (value or "").strip()
	sign = 1
	if text[:1] in ("+", "-"):
		if text[0] == "-":
			sign = -1
		text = text[1:]
	digits = ""
	for char in text:
		if not char.isdigit() or not char.isascii():
			break
		digits += char
	if not digits:
		return 0
	return max(0, sign * int(digits))


#============================================
def build_records(columns: dict[str, list[str]]) -> list[ProductRecord]:
	"""
	Zip extracted columns into product records.

	Rows whose product name is blank are dropped; their values in the other
	columns are discarded rather than shifted.

	Args:
		columns: Field name to extracted values.

	Returns:
		List of ProductRecord entries.
	"""
	def value_at(field_name: str, index: int) -> str:
		values = columns.get(field_name, [])
		if index < len(values):
			return values[index]
		return ""

	total = max((len(values) for values in columns.values()), default=0)
	records: list[ProductRecord] = []
	for index in range(total):
		product_name = value_at("product_name", index)
		if not product_name:
			continue
		records.append(
			ProductRecord(
				id=f"product-{index + 1}",
				product_name=product_name,
				order_number=value_at("order_number", index),
				product_code=value_at("product_code", index),
				quantity=parse_quantity(value_at("quantity", index)),
				remarks=value_at("remarks", index),
			)
		)
	return records


#============================================
def parse_products(
	grid: CellGrid,
	keyword_sets: dict[str, tuple[str, ...]] | None = None,
	verbose: bool = False,
) -> list[ProductRecord]:
	"""
	Run header location, column extraction and record building.

	Args:
		grid: Cell grid.
		keyword_sets: Field name to header synonyms.
		verbose: Print located header positions.

	Returns:
		List of ProductRecord entries, never empty.
	"""
	positions = locate_headers(grid, keyword_sets)
	if verbose:
		for field_name in FIELD_NAMES:
			position = positions.get(field_name)
			if position is None:
				print(f"Header {field_name}: not found")
			else:
				print(f"Header {field_name}: row {position.row} col {position.col}")

	if positions.get("product_name") is None:
		raise SchemaError("未找到产品名称列，请检查表格是否包含：产品名称、品名等关键字")

	columns: dict[str, list[str]] = {}
	for field_name, position in positions.items():
		if position is None:
			columns[field_name] = []
			continue
		columns[field_name] = extract_column(grid, position)

	records = build_records(columns)
	if not records:
		raise EmptyResultError("未找到有效的产品数据")
	return records
