import random

import herbarium_reports.flow
import herbarium_reports.surface


flow = herbarium_reports.flow
PageCursor = herbarium_reports.flow.PageCursor


#============================================
def _label_op(surface: herbarium_reports.surface.DrawingSurface, label: str, page: int):
	"""
	Find the bold label drawn by print_block on a page.
	"""
	for op in surface.ops(page):
		if op.kind == "text" and op.text == label:
			return op
	return None


#============================================
def test_print_block_fits_without_break() -> None:
	"""
	A short block advances by its height plus the gap.
	"""
	surface = herbarium_reports.surface.DrawingSurface()
	cursor = flow.print_block(surface, PageCursor(y=40.0), "Light:", "Partial shade")
	assert cursor == PageCursor(y=48.0, page_index=1)
	assert surface.page_count() == 1


#============================================
def test_print_block_breaks_before_printing() -> None:
	"""
	A block that would cross the safe bottom moves whole to a new page.
	"""
	surface = herbarium_reports.surface.DrawingSurface()
	safe_bottom = surface.layout.safe_bottom
	content = "word " * 200
	cursor = flow.print_block(surface, PageCursor(y=250.0), "Notes:", content)
	assert cursor.page_index == 2
	assert surface.page_count() == 2
	assert cursor.y <= safe_bottom
	assert _label_op(surface, "Notes:", 1) is None
	label = _label_op(surface, "Notes:", 2)
	assert label is not None
	assert label.y == surface.layout.content_top


#============================================
def test_print_block_uses_new_page_hook() -> None:
	"""
	The hook's return value becomes the top of the new page.
	"""
	surface = herbarium_reports.surface.DrawingSurface()
	calls = []

	def on_new_page(target: herbarium_reports.surface.DrawingSurface) -> float:
		calls.append(target.current_page())
		return 55.0

	cursor = flow.print_block(surface, PageCursor(y=258.0), "Field Notes:", "A line\nand another", on_new_page=on_new_page)
	assert calls == [2]
	assert cursor.y == 55.0 + 2 * 5.0 + 3.0


#============================================
def test_print_block_skips_blank_content() -> None:
	"""
	Blank values print nothing and leave the cursor alone.
	"""
	surface = herbarium_reports.surface.DrawingSurface()
	cursor = PageCursor(y=100.0)
	assert flow.print_block(surface, cursor, "Substrate:", "   ") is cursor
	assert flow.print_block(surface, cursor, "Substrate:", None) is cursor
	assert surface.ops() == []


#============================================
def test_check_page_break_threshold() -> None:
	"""
	A break happens only when the needed space crosses the safe bottom.
	"""
	surface = herbarium_reports.surface.DrawingSurface()
	cursor = PageCursor(y=255.0)
	assert flow.check_page_break(surface, cursor, 7.0) is cursor
	moved = flow.check_page_break(surface, cursor, 10.0)
	assert moved == PageCursor(y=surface.layout.content_top, page_index=2)


#============================================
def test_cursor_never_passes_safe_bottom() -> None:
	"""
	Over many blocks, each break bumps the page by one and resets y.
	"""
	rng = random.Random(3)
	surface = herbarium_reports.surface.DrawingSurface()
	safe_bottom = surface.layout.safe_bottom
	cursor = PageCursor(y=surface.layout.content_top)
	for index in range(60):
		content = "lorem ipsum " * rng.randint(1, 40)
		before = cursor
		cursor = flow.print_block(surface, cursor, f"Block {index}:", content)
		assert cursor.y <= safe_bottom
		assert cursor.page_index in (before.page_index, before.page_index + 1)
		if cursor.page_index == before.page_index + 1:
			label = _label_op(surface, f"Block {index}:", cursor.page_index)
			assert label.y == surface.layout.content_top
	assert surface.page_count() == cursor.page_index


#============================================
def test_print_lines_breaks_between_lines() -> None:
	"""
	Line by line printing continues on the next page.
	"""
	surface = herbarium_reports.surface.DrawingSurface()
	lines = [f"line {index}" for index in range(10)]
	cursor = flow.print_lines(surface, PageCursor(y=245.0), lines, 16.0)
	assert cursor.page_index == 2
	page_one = [op.text for op in surface.ops(1)]
	page_two = [op.text for op in surface.ops(2)]
	assert page_one + page_two == lines
	assert page_one == lines[:3]
