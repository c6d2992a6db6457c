"""
CLI entry points for spreadsheet to label PDF conversion.
"""

# Standard Library
import argparse
import datetime
import pathlib
import sys
import time

# local repo modules
import order_label_generator as olg
import order_label_generator.assemble
import order_label_generator.config
import order_label_generator.errors
import order_label_generator.expand
import order_label_generator.extract
import order_label_generator.render
import order_label_generator.sheet_reader
import order_label_generator.store


LabelJobConfig = olg.config.LabelJobConfig
LabelStyle = olg.config.LabelStyle
RenderConfig = olg.config.RenderConfig
ConfigurationError = olg.errors.ConfigurationError
LabelGenerationError = olg.errors.LabelGenerationError

DEFAULT_SPARE_QUANTITY = olg.config.DEFAULT_SPARE_QUANTITY
DEFAULT_TEXT_SIZE = olg.config.DEFAULT_TEXT_SIZE
DEFAULT_DOCUMENT_LABEL = olg.config.DEFAULT_DOCUMENT_LABEL


#============================================
def build_job_config(args: argparse.Namespace) -> LabelJobConfig:
	"""
	Build the job config from CLI args, validating caller-side limits.

	Args:
		args: Parsed argparse namespace.

	Returns:
		LabelJobConfig.
	"""
	if args.spare_quantity < 0:
		raise ConfigurationError("备品数量不能小于 0")
	if args.font_size <= 0:
		raise ConfigurationError("品名字体大小必须大于 0")
	styles = set()
	if args.chinese:
		styles.add(LabelStyle.CHINESE)
	if args.english:
		styles.add(LabelStyle.ENGLISH)
	if args.silver:
		styles.add(LabelStyle.SILVER)
	olg.expand.resolve_enabled_styles(styles)
	return LabelJobConfig(
		spare_quantity_per_style=args.spare_quantity,
		font_size_for_primary_field=args.font_size,
		enabled_styles=frozenset(styles),
	)


#============================================
def build_render_config(args: argparse.Namespace) -> RenderConfig:
	"""
	Build the render config from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		RenderConfig.
	"""
	bold_offsets = olg.config.FAUX_BOLD_OFFSETS
	if not args.faux_bold:
		bold_offsets = ((0.0, 0.0),)
	return RenderConfig(
		bold_offsets=bold_offsets,
		font_path=args.font_path,
	)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Argument list, sys.argv when None.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Convert an order spreadsheet into a label PDF.")
	parser.add_argument("input", nargs="?", default=None, help="XLSX or XLS order sheet.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output-dir", dest="output_dir", default=".", help="Output directory.")
	output_group.add_argument("-L", "--document-label", dest="document_label", default=DEFAULT_DOCUMENT_LABEL, help="Label part of the PDF filename.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")
	output_group.add_argument("-p", "--preview", dest="preview_path", default=None, help="Write a PNG preview of the first label.")

	job_group = parser.add_argument_group("Labels")
	job_group.add_argument("-s", "--spare-quantity", dest="spare_quantity", type=int, default=DEFAULT_SPARE_QUANTITY, help="Quantity printed on spare labels.")
	job_group.add_argument("-f", "--font-size", dest="font_size", type=float, default=DEFAULT_TEXT_SIZE, help="Product name font size in points.")
	job_group.add_argument("--no-chinese", dest="chinese", action="store_false", help="Skip Chinese tag labels.")
	job_group.add_argument("--no-english", dest="english", action="store_false", help="Skip English tag labels.")
	job_group.add_argument("--no-silver", dest="silver", action="store_false", help="Skip silver foil tag labels.")
	job_group.add_argument("-F", "--font-path", dest="font_path", default=None, help="TTF font to embed instead of the built-in CJK font.")
	job_group.add_argument("-B", "--no-faux-bold", dest="faux_bold", action="store_false", help="Draw text once instead of restamping.")

	select_group = parser.add_argument_group("Selection")
	select_group.add_argument("-q", "--search", dest="search", default="", help="Only label products matching this text.")
	select_group.add_argument("-i", "--ids", dest="ids", nargs="+", default=None, help="Only label these product ids.")
	select_group.add_argument("-S", "--store", dest="store_path", default=None, help="Product list JSON; written after import, read when no input is given.")
	select_group.add_argument(
		"--stop-before-rendering",
		dest="stop_before_rendering",
		action="store_true",
		help="Stop after listing products (skip PDF generation).",
	)

	parser.set_defaults(
		chinese=True,
		english=True,
		silver=True,
		faux_bold=True,
		stop_before_rendering=False,
	)

	args = parser.parse_args(argv)
	return args


#============================================
def load_products(args: argparse.Namespace) -> list[olg.config.ProductRecord]:
	"""
	Load products from the input sheet, or from the store when no input is given.

	Args:
		args: Parsed argparse namespace.

	Returns:
		List of ProductRecord.
	"""
	store = None
	if args.store_path:
		store = olg.store.ProductStore(pathlib.Path(args.store_path))
	if args.input is None:
		if store is None:
			raise ConfigurationError("需要输入 Excel 文件或产品列表文件")
		products = store.get()
		if products is None:
			raise ConfigurationError(f"产品列表文件不存在: {args.store_path}")
		print(f"Products loaded from store: {len(products)}")
		return products

	grid = olg.sheet_reader.read_grid(pathlib.Path(args.input))
	products = olg.extract.parse_products(grid, verbose=True)
	print(f"成功解析 {len(products)} 条产品数据")
	if store is not None:
		store.set(products)
		print(f"Product list stored: {args.store_path}")
	return products


#============================================
def run_pipeline(args: argparse.Namespace) -> None:
	"""
	Run the full pipeline from spreadsheet to label PDF.

	Args:
		args: Parsed argparse namespace.
	"""
	print("Order sheet to label PDF pipeline")
	if args.input:
		print(f"Input: {args.input}")
	print(f"Output directory: {args.output_dir}")
	print(f"Spare quantity: {args.spare_quantity}")
	print(f"Product name font size: {args.font_size}")
	print(f"Styles: chinese={args.chinese} english={args.english} silver={args.silver}")

	job = build_job_config(args)
	config = build_render_config(args)

	start_time = time.perf_counter()
	products = load_products(args)
	read_end = time.perf_counter()

	products = olg.store.filter_products(products, args.search)
	if args.ids:
		products = olg.store.select_products(products, args.ids)
	if not products:
		raise olg.errors.EmptyResultError("没有选中的产品")

	stats = olg.expand.compute_label_stats(products, job)
	print(f"Selected products: {stats.selected_count}")
	print(f"Enabled styles: {stats.enabled_styles}")
	print(f"Regular labels: {stats.regular_labels}")
	print(f"Spare labels: {stats.spare_labels}")
	print(f"Total labels: {stats.total_labels}")
	if args.stop_before_rendering:
		for product in products:
			print(f"{product.id}\t{product.product_name}\t{product.order_number}\t{product.product_code}\t{product.quantity}\t{product.remarks}")
		print("Stopping before rendering labels.")
		return

	instances = olg.expand.expand_label_instances(products, job)
	print(f"Label instances: {len(instances)}")

	output_dir = pathlib.Path(args.output_dir)
	filename = olg.assemble.build_output_filename(datetime.date.today(), args.document_label)
	output_path = output_dir / filename
	render_start = time.perf_counter()
	result = olg.assemble.assemble_document(instances, output_path, job, config, verbose=True)
	render_end = time.perf_counter()
	summary = olg.assemble.read_document_summary(output_path)
	print(f"Pages written: {summary['pages']}")
	print(f"Output PDF: {result.output_path}")

	if args.preview_path:
		image = olg.render.render_preview(instances[0], job, config)
		olg.render.save_preview(image, pathlib.Path(args.preview_path))
		print(f"Preview written: {args.preview_path}")

	manifest_path = args.manifest_path
	if manifest_path is None:
		manifest_path = f"{output_path}.json"
	olg.assemble.write_manifest(
		pathlib.Path(manifest_path),
		pathlib.Path(args.input or args.store_path),
		products,
		stats,
		result,
		job,
		config,
	)
	print(f"Manifest written: {manifest_path}")

	total_time = time.perf_counter() - start_time
	print(
		"Timing: read={:.2f}s render={:.2f}s total={:.2f}s".format(
			read_end - start_time,
			render_end - render_start,
			total_time,
		)
	)


#============================================
def main(argv: list[str] | None = None) -> int:
	"""
	Main entry point.

	Args:
		argv: Argument list, sys.argv when None.

	Returns:
		Process exit status.
	"""
	args = parse_args(argv)
	try:
		run_pipeline(args)
	except LabelGenerationError as error:
		print(f"Error: {error.message}", file=sys.stderr)
		return 1
	return 0
