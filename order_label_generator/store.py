"""
Product list hand-off between the import step and label generation.
"""

# Standard Library
import dataclasses
import json
import pathlib

# local repo modules
import order_label_generator as olg
import order_label_generator.config
import order_label_generator.errors


ProductRecord = olg.config.ProductRecord
SourceReadError = olg.errors.SourceReadError


class ProductStore:
	"""
	JSON file holding the most recently imported product list.
	"""

	def __init__(self, path: pathlib.Path):
		self.path = pathlib.Path(path)

	def get(self) -> list[ProductRecord] | None:
		"""
		Load the stored products.

		Returns:
			List of ProductRecord, or None when nothing was stored.
		"""
		if not self.path.exists():
			return None
		try:
			text = self.path.read_text(encoding="utf-8")
			payload = json.loads(text)
			return [ProductRecord(**entry) for entry in payload]
		except (OSError, ValueError, TypeError) as error:
			raise SourceReadError(f"产品列表文件无法读取: {self.path}") from error

	def set(self, products: list[ProductRecord]) -> None:
		"""
		Replace the stored products.

		Args:
			products: Products to store.
		"""
		self.path.parent.mkdir(parents=True, exist_ok=True)
		payload = [dataclasses.asdict(product) for product in products]
		text = json.dumps(payload, indent=2, ensure_ascii=False)
		self.path.write_text(text, encoding="utf-8")


#============================================
def filter_products(products: list[ProductRecord], term: str) -> list[ProductRecord]:
	"""
	Case-insensitive search on name, order number and product code.

	Args:
		products: Product records.
		term: Search text; blank keeps everything.

	Returns:
		Matching products in original order.
	"""
	needle = (term or "").lower()
	if not needle:
		return list(products)
	matches: list[ProductRecord] = []
	for product in products:
		fields = (product.product_name, product.order_number, product.product_code)
		if any(needle in value.lower() for value in fields):
			matches.append(product)
	return matches


#============================================
def select_products(products: list[ProductRecord], ids: list[str]) -> list[ProductRecord]:
	"""
	Keep the products whose id is selected, in product list order.
	"""
	wanted = set(ids)
	return [product for product in products if product.id in wanted]
