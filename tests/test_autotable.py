import io

import pypdf
import pytest

import herbarium_reports.autotable
import herbarium_reports.surface


autotable = herbarium_reports.autotable
ColumnSpec = herbarium_reports.autotable.ColumnSpec


#============================================
def _columns() -> list:
	"""
	Three column layout used by the table tests.
	"""
	return [ColumnSpec("Scientific Name"), ColumnSpec("Family", 40.0), ColumnSpec("Location")]


#============================================
def _pdf_text(surface: herbarium_reports.surface.DrawingSurface) -> list[str]:
	"""
	Extract the text of each rendered page.
	"""
	reader = pypdf.PdfReader(io.BytesIO(surface.to_bytes()))
	return [page.extract_text() for page in reader.pages]


#============================================
def test_resolve_column_widths_shares_remainder() -> None:
	"""
	Automatic columns split the width left by fixed columns.
	"""
	widths = autotable.resolve_column_widths(_columns(), 180.0)
	assert widths == [70.0, 40.0, 70.0]
	fixed = [ColumnSpec("A", 30.0), ColumnSpec("B", 20.0)]
	assert autotable.resolve_column_widths(fixed, 180.0) == [30.0, 20.0]


#============================================
def test_empty_table_draws_placeholder() -> None:
	"""
	An empty body renders one spanning placeholder row.
	"""
	surface = herbarium_reports.surface.DrawingSurface()
	calls = []

	def on_new_page(target: herbarium_reports.surface.DrawingSurface) -> float:
		calls.append(target.current_page())
		return target.layout.content_top

	layout = autotable.draw_table(surface, _columns(), [], 40.0, on_new_page)
	assert calls == []
	assert layout.parts == 1
	assert layout.row_count == 0
	assert layout.end_y > 40.0
	text = _pdf_text(surface)[0]
	assert "No records found." in text
	assert "Scientific Name" in text


#============================================
def test_build_table_requires_columns() -> None:
	"""
	A table without columns is rejected.
	"""
	with pytest.raises(ValueError):
		autotable.build_table([], [], 180.0)


#============================================
def test_long_table_paginates_with_repeated_header() -> None:
	"""
	Rows spill onto new pages, each starting below the hook's chrome.
	"""
	surface = herbarium_reports.surface.DrawingSurface()
	safe_bottom = surface.layout.safe_bottom
	calls = []

	def on_new_page(target: herbarium_reports.surface.DrawingSurface) -> float:
		calls.append(target.current_page())
		target.text("Running header", 14.0, 15.0)
		return 30.0

	rows = [[f"Species {index:03d}", "Fabaceae", "Brasilia"] for index in range(150)]
	layout = autotable.draw_table(surface, _columns(), rows, 60.0, on_new_page)
	assert surface.page_count() > 1
	assert calls == list(range(2, surface.page_count() + 1))
	assert layout.pages == list(range(1, surface.page_count() + 1))
	assert layout.parts == surface.page_count()
	for page in range(1, surface.page_count() + 1):
		flowables = [op for op in surface.ops(page) if op.kind == "flowable"]
		assert len(flowables) == 1
		assert flowables[0].y + flowables[0].height <= safe_bottom + 0.01
		if page > 1:
			assert flowables[0].y == 30.0
	texts = _pdf_text(surface)
	assert all("Scientific Name" in text for text in texts)
	joined = "\n".join(texts)
	assert "Species 000" in joined
	assert "Species 149" in joined


#============================================
def test_cell_text_is_escaped() -> None:
	"""
	Markup characters in cell values are drawn literally.
	"""
	surface = herbarium_reports.surface.DrawingSurface()
	rows = [["Ficus <b>benjamina</b> & co", "Moraceae", "-"]]
	autotable.draw_table(surface, _columns(), rows, 40.0, lambda target: target.layout.content_top)
	text = _pdf_text(surface)[0]
	assert "<b>benjamina</b>" in text
	assert "& co" in text
