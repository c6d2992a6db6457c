"""
Drawing surfaces: reportlab canvas for the printable document and a Pillow
image for the on-screen preview.
"""

# Standard Library
import hashlib
import io
import pathlib

# PIP3 modules
import fitz
import PIL.Image
import PIL.ImageDraw
import PIL.ImageFont
import reportlab.pdfbase.cidfonts
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfbase.ttfonts
import reportlab.pdfgen.canvas

# local repo modules
import order_label_generator as olg
import order_label_generator.config
import order_label_generator.errors
import order_label_generator.layout


LabelInstance = olg.config.LabelInstance
LabelJobConfig = olg.config.LabelJobConfig
RenderConfig = olg.config.RenderConfig

CUSTOM_FONT_NAME = olg.config.CUSTOM_FONT_NAME
DEFAULT_FONT_NAME = olg.config.DEFAULT_FONT_NAME
PREVIEW_PIXELS_PER_MM = olg.config.PREVIEW_PIXELS_PER_MM
PREVIEW_FALLBACK_FONT = olg.config.PREVIEW_FALLBACK_FONT
PROGRESS_BAR_WIDTH = olg.config.PROGRESS_BAR_WIDTH

mm_to_points = olg.config.mm_to_points
points_to_mm = olg.config.points_to_mm


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def custom_font_name(font_path: str | pathlib.Path) -> str:
	"""
	ReportLab font name for a TTF path, unique per resolved path.

	Args:
		font_path: TTF path.

	Returns:
		Font name like LabelFont-1a2b3c4d.
	"""
	resolved = str(pathlib.Path(font_path).resolve())
	digest = hashlib.sha256(resolved.encode("utf-8")).hexdigest()[:8]
	return f"{CUSTOM_FONT_NAME}-{digest}"


#============================================
def register_font(config: RenderConfig) -> str:
	"""
	Register the label font with reportlab.

	A TTF given by font_path is embedded under a name derived from its path;
	otherwise the built-in CID font is used, which needs no font file.

	Args:
		config: Render configuration.

	Returns:
		ReportLab font name.
	"""
	registered = reportlab.pdfbase.pdfmetrics.getRegisteredFontNames()
	if config.font_path:
		font_name = custom_font_name(config.font_path)
		if font_name not in registered:
			font = reportlab.pdfbase.ttfonts.TTFont(font_name, str(config.font_path))
			reportlab.pdfbase.pdfmetrics.registerFont(font)
		return font_name
	if config.font_name == DEFAULT_FONT_NAME and DEFAULT_FONT_NAME not in registered:
		font = reportlab.pdfbase.cidfonts.UnicodeCIDFont(DEFAULT_FONT_NAME)
		reportlab.pdfbase.pdfmetrics.registerFont(font)
	return config.font_name


#============================================
def load_preview_font_data(config: RenderConfig) -> bytes:
	"""
	Font file bytes for the preview image.

	Uses font_path when given, otherwise the CJK fallback font bundled with
	PyMuPDF, so captions and Chinese titles have real glyphs.

	Args:
		config: Render configuration.

	Returns:
		TrueType font data.
	"""
	if config.font_path:
		try:
			return pathlib.Path(config.font_path).read_bytes()
		except OSError as error:
			raise olg.errors.ConfigurationError(f"字体文件读取失败: {config.font_path}") from error
	data = fitz.Font(PREVIEW_FALLBACK_FONT).buffer
	if not data:
		raise olg.errors.ConfigurationError("预览需要中文字体，请使用 --font-path 指定字体文件")
	return bytes(data)


#============================================
def page_size_points(config: RenderConfig) -> tuple[float, float]:
	"""
	Label page size in points.
	"""
	return (mm_to_points(config.label_width), mm_to_points(config.label_height))


class PdfSurface:
	"""
	Drawing surface backed by a reportlab canvas (points, y up).
	"""

	def __init__(self, pdf: reportlab.pdfgen.canvas.Canvas, config: RenderConfig, font_name: str):
		self.pdf = pdf
		self.config = config
		self.font_name = font_name
		self.page_height = mm_to_points(config.label_height)
		self.pdf.setStrokeColorRGB(0.0, 0.0, 0.0)
		self.pdf.setFillColorRGB(0.0, 0.0, 0.0)

	def draw_rect(self, x: float, y: float, width: float, height: float, line_width: float) -> None:
		self.pdf.setLineWidth(mm_to_points(line_width))
		self.pdf.rect(
			mm_to_points(x),
			self.page_height - mm_to_points(y + height),
			mm_to_points(width),
			mm_to_points(height),
			stroke=1,
			fill=0,
		)

	def draw_text(self, text: str, x: float, y: float, font_size: float) -> None:
		ascent, descent = reportlab.pdfbase.pdfmetrics.getAscentDescent(self.font_name, font_size)
		center_y = self.page_height - mm_to_points(y)
		baseline_y = center_y - (ascent + descent) / 2.0
		self.pdf.setFont(self.font_name, font_size)
		self.pdf.drawCentredString(mm_to_points(x), baseline_y, text)

	def measure_text(self, text: str, font_size: float) -> float:
		width = reportlab.pdfbase.pdfmetrics.stringWidth(text, self.font_name, font_size)
		return points_to_mm(width)

	def new_page(self) -> None:
		self.pdf.showPage()
		self.pdf.setStrokeColorRGB(0.0, 0.0, 0.0)
		self.pdf.setFillColorRGB(0.0, 0.0, 0.0)


class PreviewSurface:
	"""
	Drawing surface backed by a Pillow image (pixels, y down).
	"""

	def __init__(self, config: RenderConfig, scale: float = PREVIEW_PIXELS_PER_MM):
		self.config = config
		self.scale = scale
		size = (
			int(round(config.label_width * scale)),
			int(round(config.label_height * scale)),
		)
		self.image = PIL.Image.new("RGB", size, "white")
		self.draw = PIL.ImageDraw.Draw(self.image)
		self.font_data = load_preview_font_data(config)
		self._fonts: dict[float, PIL.ImageFont.FreeTypeFont] = {}

	def _font(self, font_size: float):
		if font_size not in self._fonts:
			size_px = points_to_mm(font_size) * self.scale
			font = PIL.ImageFont.truetype(io.BytesIO(self.font_data), max(1, int(round(size_px))))
			self._fonts[font_size] = font
		return self._fonts[font_size]

	def draw_rect(self, x: float, y: float, width: float, height: float, line_width: float) -> None:
		box = (
			x * self.scale,
			y * self.scale,
			(x + width) * self.scale,
			(y + height) * self.scale,
		)
		stroke = max(1, int(round(line_width * self.scale)))
		self.draw.rectangle(box, outline="black", width=stroke)

	def draw_text(self, text: str, x: float, y: float, font_size: float) -> None:
		self.draw.text(
			(x * self.scale, y * self.scale),
			text,
			fill="black",
			font=self._font(font_size),
			anchor="mm",
		)

	def measure_text(self, text: str, font_size: float) -> float:
		return self._font(font_size).getlength(text) / self.scale

	def new_page(self) -> None:
		# single label surface, start over
		self.draw.rectangle((0, 0, self.image.width, self.image.height), fill="white")


#============================================
def render_preview(
	instance: LabelInstance,
	job: LabelJobConfig,
	config: RenderConfig,
	scale: float = PREVIEW_PIXELS_PER_MM,
) -> PIL.Image.Image:
	"""
	Render one label instance to an image.

	Args:
		instance: Label instance.
		job: Job configuration.
		config: Render configuration.
		scale: Pixels per millimeter.

	Returns:
		PIL image of the label.
	"""
	surface = PreviewSurface(config, scale)
	olg.layout.render_label(surface, instance, job, config)
	return surface.image


#============================================
def save_preview(image: PIL.Image.Image, output_path: pathlib.Path) -> None:
	"""
	Save a preview image, creating the parent directory.

	Args:
		image: Preview image.
		output_path: PNG path.
	"""
	output_path = pathlib.Path(output_path)
	output_path.parent.mkdir(parents=True, exist_ok=True)
	image.save(output_path)
