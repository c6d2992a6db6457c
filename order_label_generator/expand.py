"""
Split order quantities into packages and expand products into label instances.
"""

# local repo modules
import order_label_generator as olg
import order_label_generator.config
import order_label_generator.errors


LabelInstance = olg.config.LabelInstance
LabelJobConfig = olg.config.LabelJobConfig
LabelStats = olg.config.LabelStats
LabelStyle = olg.config.LabelStyle
ProductRecord = olg.config.ProductRecord
ConfigurationError = olg.errors.ConfigurationError

PACKAGE_CAP = olg.config.PACKAGE_CAP
QUANTITY_UNIT = olg.config.QUANTITY_UNIT
SPARE_SUFFIX = olg.config.SPARE_SUFFIX
STYLE_ORDER = olg.config.STYLE_ORDER


#============================================
def split_quantity(total: int, cap: int = PACKAGE_CAP) -> list[int]:
	"""
	Split a total quantity into packages of at most cap.

	Args:
		total: Total order quantity.
		cap: Maximum package size.

	Returns:
		Package sizes, full packages first; empty when total <= 0.
	"""
	packages: list[int] = []
	remaining = total
	while remaining > 0:
		package = min(remaining, cap)
		packages.append(package)
		remaining -= package
	return packages


#============================================
def resolve_enabled_styles(styles) -> tuple[LabelStyle, ...]:
	"""
	Order the enabled styles for generation.

	Args:
		styles: Iterable of LabelStyle.

	Returns:
		Enabled styles in generation order.
	"""
	enabled = set(styles)
	ordered = tuple(style for style in STYLE_ORDER if style in enabled)
	if not ordered:
		raise ConfigurationError("请至少选择一种标签款式")
	return ordered


#============================================
def format_quantity(quantity: int) -> str:
	"""
	Format a quantity for the label, blank when not positive.
	"""
	if quantity > 0:
		return f"{quantity}{QUANTITY_UNIT}"
	return ""


#============================================
def build_label_instance(
	product: ProductRecord,
	quantity: int,
	style: LabelStyle,
	is_spare: bool,
) -> LabelInstance:
	"""
	Build one label instance.

	Args:
		product: Product record.
		quantity: Package or spare quantity.
		style: Label style.
		is_spare: Whether this is a spare label.

	Returns:
		LabelInstance.
	"""
	title = f"{product.product_name}-{style.suffix}"
	if is_spare:
		title = f"{title}-{SPARE_SUFFIX}"
	return LabelInstance(
		title=title,
		order_number=product.order_number,
		product_code=product.product_code,
		quantity_text=format_quantity(quantity),
		remarks=product.remarks,
		style=style,
		is_spare=is_spare,
		product_id=product.id,
	)


#============================================
def expand_label_instances(
	products: list[ProductRecord],
	job: LabelJobConfig,
) -> list[LabelInstance]:
	"""
	Expand products into the ordered list of label instances.

	Each product yields its regular labels (package by package, style by
	style) followed by one spare label per style before the next product.

	Args:
		products: Product records.
		job: Job configuration.

	Returns:
		List of LabelInstance entries in print order.
	"""
	styles = resolve_enabled_styles(job.enabled_styles)
	instances: list[LabelInstance] = []
	for product in products:
		for package in split_quantity(product.quantity):
			for style in styles:
				instances.append(build_label_instance(product, package, style, False))
		for style in styles:
			instances.append(
				build_label_instance(product, job.spare_quantity_per_style, style, True)
			)
	return instances


#============================================
def compute_label_stats(products: list[ProductRecord], job: LabelJobConfig) -> LabelStats:
	"""
	Summarize how many labels a job will produce.

	Counts match what expand_label_instances produces for the same input.

	Args:
		products: Selected product records.
		job: Job configuration.

	Returns:
		LabelStats.
	"""
	enabled = len(set(job.enabled_styles))
	regular = sum(len(split_quantity(product.quantity)) for product in products)
	spare = len(products)
	return LabelStats(
		selected_count=len(products),
		enabled_styles=enabled,
		regular_labels=regular * enabled,
		spare_labels=spare * enabled,
		total_labels=(regular + spare) * enabled,
	)
