"""
Document assembly: one label per page, in expansion order.
"""

# Standard Library
import datetime
import json
import pathlib

# PIP3 modules
import pypdf
import reportlab.pdfgen.canvas

# local repo modules
import order_label_generator as olg
import order_label_generator.config
import order_label_generator.errors
import order_label_generator.layout
import order_label_generator.render


AssemblyResult = olg.config.AssemblyResult
LabelInstance = olg.config.LabelInstance
LabelJobConfig = olg.config.LabelJobConfig
LabelStats = olg.config.LabelStats
ProductRecord = olg.config.ProductRecord
RenderConfig = olg.config.RenderConfig

DEFAULT_DOCUMENT_LABEL = olg.config.DEFAULT_DOCUMENT_LABEL
PROGRESS_UPDATE_EVERY = olg.config.PROGRESS_UPDATE_EVERY


#============================================
def sanitize_token(value: str) -> str:
	"""
	Sanitize a string for filenames.

	Args:
		value: Input string.

	Returns:
		Sanitized string.
	"""
	result: list[str] = []
	for char in value:
		if char.isalnum() or char in "-_":
			result.append(char)
		else:
			result.append("_")
	sanitized = "".join(result).strip("_")
	if not sanitized:
		return "labels"
	return sanitized


#============================================
def build_output_filename(
	date: datetime.date | None = None,
	label: str = DEFAULT_DOCUMENT_LABEL,
) -> str:
	"""
	Build the document filename from the generation date.

	Args:
		date: Generation date, today when None.
		label: Product label part of the name.

	Returns:
		Filename like 20260101_label.pdf.
	"""
	if date is None:
		date = datetime.date.today()
	return f"{date.strftime('%Y%m%d')}_{sanitize_token(label)}.pdf"


#============================================
def assemble_document(
	instances: list[LabelInstance],
	output_path: pathlib.Path,
	job: LabelJobConfig,
	config: RenderConfig,
	verbose: bool = False,
) -> AssemblyResult:
	"""
	Draw every label instance on its own page and save the PDF.

	Args:
		instances: Label instances in print order.
		output_path: Output PDF path.
		job: Job configuration.
		config: Render configuration.
		verbose: Print a progress bar.

	Returns:
		AssemblyResult.
	"""
	if not instances:
		raise olg.errors.ConfigurationError("没有可生成的标签")
	output_path = pathlib.Path(output_path)
	output_path.parent.mkdir(parents=True, exist_ok=True)
	font_name = olg.render.register_font(config)
	page_width, page_height = olg.render.page_size_points(config)
	pdf = reportlab.pdfgen.canvas.Canvas(str(output_path), pagesize=(page_width, page_height))
	surface = olg.render.PdfSurface(pdf, config, font_name)

	total = len(instances)
	for index, instance in enumerate(instances, start=1):
		if index > 1:
			surface.new_page()
		olg.layout.render_label(surface, instance, job, config)
		if verbose and (index % PROGRESS_UPDATE_EVERY == 0 or index == total):
			olg.render.print_progress("Labels", index, total)
	if verbose and total > 0:
		print()
	pdf.save()

	return AssemblyResult(
		total_labels=total,
		pages=total,
		output_path=str(output_path),
		page_width=page_width,
		page_height=page_height,
	)


#============================================
def read_document_summary(path: pathlib.Path) -> dict[str, float | int]:
	"""
	Read page count and first page size from a written PDF.

	Args:
		path: PDF path.

	Returns:
		Dict with pages, page_width and page_height in points.
	"""
	reader = pypdf.PdfReader(str(path))
	summary: dict[str, float | int] = {"pages": len(reader.pages)}
	if reader.pages:
		box = reader.pages[0].mediabox
		summary["page_width"] = float(box.width)
		summary["page_height"] = float(box.height)
	return summary


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	source_path: pathlib.Path,
	products: list[ProductRecord],
	stats: LabelStats,
	result: AssemblyResult,
	job: LabelJobConfig,
	config: RenderConfig,
) -> None:
	"""
	Write a manifest JSON file describing the generated document.

	Args:
		manifest_path: Output path.
		source_path: Input spreadsheet.
		products: Products that were labeled.
		stats: Label statistics.
		result: Assembly result.
		job: Job configuration.
		config: Render configuration.
	"""
	data = {
		"source": str(source_path),
		"output": result.output_path,
		"products": [
			{
				"id": product.id,
				"product_name": product.product_name,
				"order_number": product.order_number,
				"product_code": product.product_code,
				"quantity": product.quantity,
				"remarks": product.remarks,
			}
			for product in products
		],
		"total_labels": result.total_labels,
		"regular_labels": stats.regular_labels,
		"spare_labels": stats.spare_labels,
		"pages": result.pages,
		"job": {
			"spare_quantity_per_style": job.spare_quantity_per_style,
			"font_size_for_primary_field": job.font_size_for_primary_field,
			"enabled_styles": [
				style.value for style in olg.config.STYLE_ORDER if style in job.enabled_styles
			],
		},
		"layout": {
			"label_width_mm": config.label_width,
			"label_height_mm": config.label_height,
			"page_margin_mm": config.page_margin,
			"label_column_width_mm": config.label_column_width,
			"line_width_pt": config.line_width_pt,
			"default_font_size": config.default_font_size,
			"font_name": config.font_name,
			"font_path": config.font_path,
		},
	}
	manifest_path = pathlib.Path(manifest_path)
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True, ensure_ascii=False)
