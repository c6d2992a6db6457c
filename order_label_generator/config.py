"""
Shared configuration and constants.
"""

import dataclasses
import enum


POINTS_PER_INCH = 72.0
MM_PER_INCH = 25.4
MM_PER_POINT = MM_PER_INCH / POINTS_PER_INCH

LABEL_WIDTH_MM = 90.0
LABEL_HEIGHT_MM = 50.0
PAGE_MARGIN_MM = 5.0
LABEL_COLUMN_WIDTH_MM = 20.0
TABLE_ROWS = 5
LINE_WIDTH_PT = 0.8
WRAP_PADDING_MM = 2.0

DEFAULT_TEXT_SIZE = 10.0
LINE_SPACING = 1.2
# fixed conversion used for wrapped block height
LINE_HEIGHT_MM_PER_POINT = 0.35
FAUX_BOLD_DELTA_MM = 0.1
FAUX_BOLD_OFFSETS = (
	(0.0, 0.0),
	(FAUX_BOLD_DELTA_MM, 0.0),
	(0.0, FAUX_BOLD_DELTA_MM),
	(FAUX_BOLD_DELTA_MM, FAUX_BOLD_DELTA_MM),
)

DEFAULT_FONT_NAME = "STSong-Light"
CUSTOM_FONT_NAME = "LabelFont"
PREVIEW_PIXELS_PER_MM = 8.0
# PyMuPDF built-in CJK font (Droid Sans Fallback)
PREVIEW_FALLBACK_FONT = "cjk"

PACKAGE_CAP = 5000
DEFAULT_SPARE_QUANTITY = 200
QUANTITY_UNIT = "张"
SPARE_SUFFIX = "备品"
DEFAULT_DOCUMENT_LABEL = "华旺标签"

DEFAULT_GRID_ROWS = 100
DEFAULT_GRID_COLUMNS = 26
LOOKAHEAD_ROWS = 5
SUPPORTED_EXTENSIONS = (".xlsx", ".xls")

PROGRESS_BAR_WIDTH = 20
PROGRESS_UPDATE_EVERY = 10

FIELD_NAMES = ("product_name", "order_number", "product_code", "quantity", "remarks")

COLUMN_KEYWORDS = {
	"product_name": ("产品名称", "品名", "商品名称", "货品名称"),
	"order_number": ("订单编号", "订单号", "单号"),
	"product_code": ("产品编号", "货号", "商品编号", "款号"),
	"quantity": ("数量", "件数", "总数"),
	"remarks": ("批次", "备注", "说明", "批号"),
}

ROW_CAPTIONS = ("品 名", "订单号", "货 号", "数 量", "备 注")


class LabelStyle(enum.Enum):
	CHINESE = "chinese"
	ENGLISH = "english"
	SILVER = "silver"

	@property
	def suffix(self) -> str:
		return STYLE_SUFFIXES[self]


STYLE_SUFFIXES = {
	LabelStyle.CHINESE: "中文吊牌",
	LabelStyle.ENGLISH: "英文吊牌",
	LabelStyle.SILVER: "烫银吊牌",
}

# generation order
STYLE_ORDER = (LabelStyle.CHINESE, LabelStyle.ENGLISH, LabelStyle.SILVER)


@dataclasses.dataclass(frozen=True)
class HeaderPosition:
	row: int
	col: int


@dataclasses.dataclass(frozen=True)
class ProductRecord:
	id: str
	product_name: str
	order_number: str = ""
	product_code: str = ""
	quantity: int = 0
	remarks: str = ""


@dataclasses.dataclass(frozen=True)
class LabelJobConfig:
	spare_quantity_per_style: int = DEFAULT_SPARE_QUANTITY
	font_size_for_primary_field: float = DEFAULT_TEXT_SIZE
	enabled_styles: frozenset = frozenset(STYLE_ORDER)


@dataclasses.dataclass(frozen=True)
class LabelInstance:
	title: str
	order_number: str
	product_code: str
	quantity_text: str
	remarks: str
	style: LabelStyle
	is_spare: bool = False
	product_id: str = ""


@dataclasses.dataclass(frozen=True)
class RenderConfig:
	label_width: float = LABEL_WIDTH_MM
	label_height: float = LABEL_HEIGHT_MM
	page_margin: float = PAGE_MARGIN_MM
	label_column_width: float = LABEL_COLUMN_WIDTH_MM
	line_width_pt: float = LINE_WIDTH_PT
	wrap_padding: float = WRAP_PADDING_MM
	default_font_size: float = DEFAULT_TEXT_SIZE
	line_spacing: float = LINE_SPACING
	line_height_mm_per_point: float = LINE_HEIGHT_MM_PER_POINT
	bold_offsets: tuple[tuple[float, float], ...] = FAUX_BOLD_OFFSETS
	font_name: str = DEFAULT_FONT_NAME
	font_path: str | None = None


@dataclasses.dataclass
class LabelStats:
	selected_count: int
	enabled_styles: int
	regular_labels: int
	spare_labels: int
	total_labels: int


@dataclasses.dataclass
class AssemblyResult:
	total_labels: int
	pages: int
	output_path: str
	page_width: float
	page_height: float


#============================================
def mm_to_points(value: float) -> float:
	"""
	Convert millimeters to points.

	Args:
		value: Millimeters value.

	Returns:
		Points value.
	"""
	return value / MM_PER_POINT


#============================================
def points_to_mm(value: float) -> float:
	"""
	Convert points to millimeters.

	Args:
		value: Points value.

	Returns:
		Millimeters value.
	"""
	return value * MM_PER_POINT
