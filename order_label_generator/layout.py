"""
Label layout: a 2 x 5 bordered table with wrapped, centered text.

All geometry is in millimeters with the origin at the top-left corner of the
label and y growing downward. Output adapters convert to their own units.
"""

# Standard Library
import dataclasses
import typing
import unicodedata

# local repo modules
import order_label_generator as olg
import order_label_generator.config


LabelInstance = olg.config.LabelInstance
LabelJobConfig = olg.config.LabelJobConfig
RenderConfig = olg.config.RenderConfig

ROW_CAPTIONS = olg.config.ROW_CAPTIONS
TABLE_ROWS = olg.config.TABLE_ROWS


class DrawingSurface(typing.Protocol):
	"""
	Drawing target shared by the printable document and the preview image.
	"""

	def draw_rect(self, x: float, y: float, width: float, height: float, line_width: float) -> None:
		...

	def draw_text(self, text: str, x: float, y: float, font_size: float) -> None:
		"""Draw text centered horizontally and vertically on (x, y)."""
		...

	def measure_text(self, text: str, font_size: float) -> float:
		"""Return the rendered width of text in millimeters."""
		...

	def new_page(self) -> None:
		...


MeasureFunc = typing.Callable[[str, float], float]


@dataclasses.dataclass(frozen=True)
class LabelGeometry:
	table_x: float
	table_y: float
	table_width: float
	table_height: float
	label_column_width: float
	value_column_width: float
	row_height: float
	line_width: float


@dataclasses.dataclass(frozen=True)
class TextRun:
	text: str
	x: float
	y: float
	font_size: float


@dataclasses.dataclass
class LabelPlan:
	geometry: LabelGeometry
	rects: list[tuple[float, float, float, float]] = dataclasses.field(default_factory=list)
	runs: list[TextRun] = dataclasses.field(default_factory=list)


#============================================
def compute_label_geometry(config: RenderConfig) -> LabelGeometry:
	"""
	Compute the table geometry for one label.

	Args:
		config: Render configuration.

	Returns:
		LabelGeometry in millimeters.
	"""
	table_width = config.label_width - 2.0 * config.page_margin
	table_height = config.label_height - 2.0 * config.page_margin
	return LabelGeometry(
		table_x=config.page_margin,
		table_y=config.page_margin,
		table_width=table_width,
		table_height=table_height,
		label_column_width=config.label_column_width,
		value_column_width=table_width - config.label_column_width,
		row_height=table_height / TABLE_ROWS,
		line_width=olg.config.points_to_mm(config.line_width_pt),
	)


#============================================
def compute_line_height(font_size: float, config: RenderConfig) -> float:
	"""
	Line height in millimeters for a font size in points.
	"""
	return font_size * config.line_height_mm_per_point * config.line_spacing


#============================================
def is_dense_char(char: str) -> bool:
	"""
	Check for characters that wrap individually (CJK and other wide glyphs).
	"""
	return unicodedata.east_asian_width(char) in ("W", "F")


#============================================
def tokenize_text(text: str) -> list[str]:
	"""
	Split text into wrap tokens.

	Wide characters are single tokens, whitespace runs are single tokens and
	other characters group into words.

	Args:
		text: Input text.

	Returns:
		List of tokens.
	"""
	tokens: list[str] = []
	word = ""
	for char in text:
		if char.isspace() or is_dense_char(char):
			if word:
				tokens.append(word)
				word = ""
			if char.isspace() and tokens and tokens[-1].isspace():
				tokens[-1] += char
			else:
				tokens.append(char)
			continue
		word += char
	if word:
		tokens.append(word)
	return tokens


#============================================
def _wrap_paragraph(
	paragraph: str,
	max_width: float,
	font_size: float,
	measure: MeasureFunc,
) -> list[str]:
	lines: list[str] = []
	current = ""
	for token in tokenize_text(paragraph):
		if token.isspace():
			if current:
				current += token
			continue
		candidate = current + token
		if measure(candidate, font_size) <= max_width:
			current = candidate
			continue
		if current.strip():
			lines.append(current.rstrip())
		current = ""
		if measure(token, font_size) <= max_width:
			current = token
			continue
		# token wider than the column, break between characters
		for char in token:
			candidate = current + char
			if current and measure(candidate, font_size) > max_width:
				lines.append(current)
				current = char
			else:
				current = candidate
	if current.strip() or not lines:
		lines.append(current.rstrip())
	return lines


#============================================
def wrap_text(
	text: str,
	max_width: float,
	font_size: float,
	measure: MeasureFunc,
) -> list[str]:
	"""
	Wrap text to a width by measuring each candidate line.

	Args:
		text: Text to wrap; explicit newlines are kept.
		max_width: Available width in millimeters.
		font_size: Font size in points.
		measure: Width function (text, font_size) -> millimeters.

	Returns:
		List of lines.
	"""
	paragraphs = text.splitlines() or [""]
	lines: list[str] = []
	for paragraph in paragraphs:
		lines.extend(_wrap_paragraph(paragraph, max_width, font_size, measure))
	return lines


#============================================
def layout_wrapped_lines(
	lines: list[str],
	center_x: float,
	row_center: float,
	font_size: float,
	config: RenderConfig,
) -> list[TextRun]:
	"""
	Stack wrapped lines as a block centered on the row.

	Args:
		lines: Wrapped lines.
		center_x: Horizontal center of the cell.
		row_center: Vertical center of the row.
		font_size: Font size in points.
		config: Render configuration.

	Returns:
		List of TextRun entries.
	"""
	line_height = compute_line_height(font_size, config)
	total_height = len(lines) * line_height
	start_y = row_center - total_height / 2.0 + line_height / 2.0
	runs: list[TextRun] = []
	for index, line in enumerate(lines):
		runs.append(TextRun(line, center_x, start_y + index * line_height, font_size))
	return runs


#============================================
def plan_label(
	instance: LabelInstance,
	job: LabelJobConfig,
	config: RenderConfig,
	measure: MeasureFunc,
) -> LabelPlan:
	"""
	Compute every rectangle and text run for one label.

	Args:
		instance: Label instance.
		job: Job configuration, for the product name font size.
		config: Render configuration.
		measure: Width function of the target surface.

	Returns:
		LabelPlan.
	"""
	geometry = compute_label_geometry(config)
	plan = LabelPlan(geometry=geometry)
	values = (
		instance.title,
		instance.order_number,
		instance.product_code,
		instance.quantity_text,
		instance.remarks,
	)
	value_x = geometry.table_x + geometry.label_column_width
	wrap_width = geometry.value_column_width - config.wrap_padding
	for index, (caption, value) in enumerate(zip(ROW_CAPTIONS, values)):
		row_y = geometry.table_y + index * geometry.row_height
		row_center = row_y + geometry.row_height / 2.0
		plan.rects.append((geometry.table_x, row_y, geometry.label_column_width, geometry.row_height))
		plan.rects.append((value_x, row_y, geometry.value_column_width, geometry.row_height))
		plan.runs.append(
			TextRun(
				caption,
				geometry.table_x + geometry.label_column_width / 2.0,
				row_center,
				config.default_font_size,
			)
		)
		if not value:
			continue
		# only the product name row follows the configurable size
		font_size = config.default_font_size
		if index == 0:
			font_size = job.font_size_for_primary_field
		lines = wrap_text(value, wrap_width, font_size, measure)
		plan.runs.extend(
			layout_wrapped_lines(
				lines,
				value_x + geometry.value_column_width / 2.0,
				row_center,
				font_size,
				config,
			)
		)
	return plan


#============================================
def draw_bold_text(
	surface: DrawingSurface,
	run: TextRun,
	offsets: tuple[tuple[float, float], ...],
) -> None:
	"""
	Stamp a text run once per offset to thicken the strokes.

	Args:
		surface: Drawing surface.
		run: Text run.
		offsets: (dx, dy) offsets in millimeters.
	"""
	for dx, dy in offsets:
		surface.draw_text(run.text, run.x + dx, run.y + dy, run.font_size)


#============================================
def draw_label(surface: DrawingSurface, plan: LabelPlan, config: RenderConfig) -> None:
	"""
	Draw a planned label onto a surface.

	Args:
		surface: Drawing surface.
		plan: Planned label.
		config: Render configuration.
	"""
	for x, y, width, height in plan.rects:
		surface.draw_rect(x, y, width, height, plan.geometry.line_width)
	offsets = config.bold_offsets or ((0.0, 0.0),)
	for run in plan.runs:
		draw_bold_text(surface, run, offsets)


#============================================
def render_label(
	surface: DrawingSurface,
	instance: LabelInstance,
	job: LabelJobConfig,
	config: RenderConfig,
) -> LabelPlan:
	"""
	Plan and draw one label instance.

	Args:
		surface: Drawing surface.
		instance: Label instance.
		job: Job configuration.
		config: Render configuration.

	Returns:
		The LabelPlan that was drawn.
	"""
	plan = plan_label(instance, job, config, surface.measure_text)
	draw_label(surface, plan, config)
	return plan
