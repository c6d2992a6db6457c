import math

import pytest

import order_label_generator.config
import order_label_generator.errors
import order_label_generator.expand


expand = order_label_generator.expand
LabelJobConfig = order_label_generator.config.LabelJobConfig
LabelStyle = order_label_generator.config.LabelStyle
ProductRecord = order_label_generator.config.ProductRecord


#============================================
def test_split_quantity_scenario() -> None:
	assert expand.split_quantity(12000) == [5000, 5000, 2000]
	assert expand.split_quantity(300) == [300]
	assert expand.split_quantity(5000) == [5000]
	assert expand.split_quantity(0) == []
	assert expand.split_quantity(-10) == []


#============================================
def test_split_quantity_properties() -> None:
	"""
	Packages sum to the total, stay within the cap and number ceil(T/C).
	"""
	for total in list(range(0, 120)) + [4999, 5000, 5001, 9999, 10000, 10001, 123456]:
		packages = expand.split_quantity(total)
		assert sum(packages) == total
		assert all(0 < package <= expand.PACKAGE_CAP for package in packages)
		assert len(packages) == math.ceil(total / expand.PACKAGE_CAP)


#============================================
def test_resolve_enabled_styles_order() -> None:
	styles = expand.resolve_enabled_styles({LabelStyle.SILVER, LabelStyle.CHINESE})
	assert styles == (LabelStyle.CHINESE, LabelStyle.SILVER)


#============================================
def test_resolve_enabled_styles_empty() -> None:
	with pytest.raises(order_label_generator.errors.ConfigurationError):
		expand.resolve_enabled_styles(set())


#============================================
def test_expand_zero_styles_produces_nothing() -> None:
	job = LabelJobConfig(enabled_styles=frozenset())
	products = [ProductRecord(id="product-1", product_name="Hat", quantity=10)]
	with pytest.raises(order_label_generator.errors.ConfigurationError):
		expand.expand_label_instances(products, job)


#============================================
def test_expand_spare_only_for_zero_quantity() -> None:
	job = LabelJobConfig(
		spare_quantity_per_style=200,
		enabled_styles=frozenset({LabelStyle.CHINESE}),
	)
	products = [ProductRecord(id="product-1", product_name="Hat", quantity=0)]
	instances = expand.expand_label_instances(products, job)
	assert len(instances) == 1
	assert instances[0].is_spare
	assert instances[0].quantity_text == "200张"
	assert instances[0].title == "Hat-中文吊牌-备品"


#============================================
def test_expand_blank_spare_quantity() -> None:
	job = LabelJobConfig(spare_quantity_per_style=0, enabled_styles=frozenset({LabelStyle.ENGLISH}))
	products = [ProductRecord(id="product-1", product_name="Hat", quantity=1)]
	instances = expand.expand_label_instances(products, job)
	assert [instance.quantity_text for instance in instances] == ["1张", ""]


#============================================
def test_expand_order_regular_then_spare_per_product() -> None:
	"""
	Package-major, style-minor regular labels, then spares, per product.
	"""
	job = LabelJobConfig(
		spare_quantity_per_style=50,
		enabled_styles=frozenset({LabelStyle.CHINESE, LabelStyle.ENGLISH}),
	)
	products = [
		ProductRecord(id="product-1", product_name="T-Shirt", order_number="PO1", quantity=7000, remarks="B1"),
		ProductRecord(id="product-2", product_name="Hat", quantity=300),
	]
	instances = expand.expand_label_instances(products, job)
	summary = [(instance.title, instance.quantity_text) for instance in instances]
	assert summary == [
		("T-Shirt-中文吊牌", "5000张"),
		("T-Shirt-英文吊牌", "5000张"),
		("T-Shirt-中文吊牌", "2000张"),
		("T-Shirt-英文吊牌", "2000张"),
		("T-Shirt-中文吊牌-备品", "50张"),
		("T-Shirt-英文吊牌-备品", "50张"),
		("Hat-中文吊牌", "300张"),
		("Hat-英文吊牌", "300张"),
		("Hat-中文吊牌-备品", "50张"),
		("Hat-英文吊牌-备品", "50张"),
	]
	assert instances[0].order_number == "PO1"
	assert instances[0].remarks == "B1"
	assert instances[0].product_id == "product-1"


#============================================
def test_expand_instance_count_property() -> None:
	products = [
		ProductRecord(id=f"product-{index}", product_name=f"P{index}", quantity=quantity)
		for index, quantity in enumerate([0, 1, 4999, 5000, 5001, 23000])
	]
	style_sets = [
		{LabelStyle.CHINESE},
		{LabelStyle.ENGLISH, LabelStyle.SILVER},
		set(order_label_generator.config.STYLE_ORDER),
	]
	for styles in style_sets:
		job = LabelJobConfig(enabled_styles=frozenset(styles))
		instances = expand.expand_label_instances(products, job)
		expected = sum(
			(math.ceil(product.quantity / expand.PACKAGE_CAP) + 1) * len(styles)
			for product in products
		)
		assert len(instances) == expected


#============================================
def test_compute_label_stats() -> None:
	job = LabelJobConfig()
	products = [
		ProductRecord(id="product-1", product_name="T-Shirt", quantity=12000),
		ProductRecord(id="product-2", product_name="Hat", quantity=300),
	]
	stats = expand.compute_label_stats(products, job)
	assert stats.selected_count == 2
	assert stats.enabled_styles == 3
	assert stats.regular_labels == 12
	assert stats.spare_labels == 6
	assert stats.total_labels == 18
	assert stats.total_labels == len(expand.expand_label_instances(products, job))
