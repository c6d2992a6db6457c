import datetime
import io
import json
import pathlib

import fitz
import pytest
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfgen.canvas

import order_label_generator.assemble
import order_label_generator.config
import order_label_generator.errors
import order_label_generator.expand
import order_label_generator.render


assemble = order_label_generator.assemble
config_module = order_label_generator.config
LabelJobConfig = config_module.LabelJobConfig
LabelStyle = config_module.LabelStyle
ProductRecord = config_module.ProductRecord
RenderConfig = config_module.RenderConfig


#============================================
def sample_instances(job: LabelJobConfig) -> tuple[list, list]:
	products = [
		ProductRecord(id="product-1", product_name="T-Shirt", order_number="PO-001", quantity=7000),
		ProductRecord(id="product-2", product_name="帽子", remarks="批次 B2", quantity=0),
	]
	return products, order_label_generator.expand.expand_label_instances(products, job)


#============================================
def test_build_output_filename() -> None:
	name = assemble.build_output_filename(datetime.date(2026, 3, 7), "华旺标签")
	assert name == "20260307_华旺标签.pdf"
	assert assemble.build_output_filename(datetime.date(2026, 3, 7), "a/b c") == "20260307_a_b_c.pdf"


#============================================
def test_assemble_document_one_page_per_label(tmp_path: pathlib.Path) -> None:
	job = LabelJobConfig(enabled_styles=frozenset({LabelStyle.CHINESE, LabelStyle.SILVER}))
	_products, instances = sample_instances(job)
	assert len(instances) == 8
	output_path = tmp_path / "out" / "labels.pdf"
	result = assemble.assemble_document(instances, output_path, job, RenderConfig())
	assert result.total_labels == 8
	assert result.pages == 8
	assert output_path.exists()

	summary = assemble.read_document_summary(output_path)
	assert summary["pages"] == 8
	assert summary["page_width"] == pytest.approx(config_module.mm_to_points(90.0), abs=0.01)
	assert summary["page_height"] == pytest.approx(config_module.mm_to_points(50.0), abs=0.01)


#============================================
def test_assemble_document_refuses_empty(tmp_path: pathlib.Path) -> None:
	output_path = tmp_path / "labels.pdf"
	with pytest.raises(order_label_generator.errors.ConfigurationError):
		assemble.assemble_document([], output_path, LabelJobConfig(), RenderConfig())
	assert not output_path.exists()


#============================================
def test_pdf_surface_measures_in_mm() -> None:
	config = RenderConfig()
	font_name = order_label_generator.render.register_font(config)
	assert font_name == config_module.DEFAULT_FONT_NAME
	pdf = reportlab.pdfgen.canvas.Canvas(io.BytesIO(), pagesize=order_label_generator.render.page_size_points(config))
	surface = order_label_generator.render.PdfSurface(pdf, config, font_name)
	width_pt = reportlab.pdfbase.pdfmetrics.stringWidth("产品 A", font_name, 10.0)
	assert width_pt > 0.0
	assert surface.measure_text("产品 A", 10.0) == pytest.approx(width_pt * 25.4 / 72.0)
	assert surface.measure_text("产品 A", 20.0) == pytest.approx(2.0 * surface.measure_text("产品 A", 10.0))


#============================================
def test_write_manifest(tmp_path: pathlib.Path) -> None:
	job = LabelJobConfig(spare_quantity_per_style=100)
	products, instances = sample_instances(job)
	output_path = tmp_path / "labels.pdf"
	config = RenderConfig()
	result = assemble.assemble_document(instances, output_path, job, config)
	stats = order_label_generator.expand.compute_label_stats(products, job)
	manifest_path = tmp_path / "labels.pdf.json"
	assemble.write_manifest(manifest_path, tmp_path / "orders.xlsx", products, stats, result, job, config)
	data = json.loads(manifest_path.read_text(encoding="utf-8"))
	assert data["total_labels"] == len(instances)
	assert data["pages"] == len(instances)
	assert data["spare_labels"] == 6
	assert data["job"]["enabled_styles"] == ["chinese", "english", "silver"]
	assert data["products"][1]["product_name"] == "帽子"


#============================================
def test_register_font_per_font_path(tmp_path: pathlib.Path) -> None:
	"""
	Each TTF path gets its own registered font name.
	"""
	data = fitz.Font("cjk").buffer
	first_path = tmp_path / "first.ttf"
	second_path = tmp_path / "second.ttf"
	first_path.write_bytes(data)
	second_path.write_bytes(data)
	render = order_label_generator.render
	first_name = render.register_font(RenderConfig(font_path=str(first_path)))
	second_name = render.register_font(RenderConfig(font_path=str(second_path)))
	assert first_name != second_name
	assert first_name == render.custom_font_name(first_path)
	assert render.register_font(RenderConfig(font_path=str(first_path))) == first_name
	registered = reportlab.pdfbase.pdfmetrics.getRegisteredFontNames()
	assert first_name in registered
	assert second_name in registered
