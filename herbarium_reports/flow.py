"""
Cursor based vertical layout of labeled text blocks.

Every layout call takes a PageCursor and returns a new one, so page breaks
show up as a changed page_index in the returned value.
"""

# Standard Library
import dataclasses
import typing

# local repo modules
import herbarium_reports as hrep
import herbarium_reports.config
import herbarium_reports.surface


FONT_REGULAR = hrep.config.FONT_REGULAR
FONT_BOLD = hrep.config.FONT_BOLD
COLOR_TEXT = hrep.config.COLOR_TEXT
FLOW_LINE_HEIGHT = hrep.config.FLOW_LINE_HEIGHT
FLOW_BLOCK_GAP = hrep.config.FLOW_BLOCK_GAP
FLOW_LABEL_WIDTH = hrep.config.FLOW_LABEL_WIDTH
FLOW_FONT_SIZE = hrep.config.FLOW_FONT_SIZE

NewPageHook = typing.Callable[[hrep.surface.DrawingSurface], float]


@dataclasses.dataclass(frozen=True)
class PageCursor:
	y: float
	page_index: int = 1


#============================================
def start_new_page(
	surface: hrep.surface.DrawingSurface,
	cursor: PageCursor,
	on_new_page: NewPageHook | None = None,
) -> PageCursor:
	"""
	Add a page and reset the cursor to the top of its content area.

	Args:
		surface: Drawing surface.
		cursor: Cursor before the break.
		on_new_page: Hook drawing the page chrome, returns the content top.

	Returns:
		Cursor on the new page.
	"""
	surface.add_page()
	if on_new_page is None:
		top = surface.layout.content_top
	else:
		top = on_new_page(surface)
	return PageCursor(y=top, page_index=cursor.page_index + 1)


#============================================
def check_page_break(
	surface: hrep.surface.DrawingSurface,
	cursor: PageCursor,
	needed: float,
	on_new_page: NewPageHook | None = None,
	safe_bottom: float | None = None,
) -> PageCursor:
	"""
	Start a new page when needed millimetres do not fit below the cursor.

	Args:
		surface: Drawing surface.
		cursor: Current cursor.
		needed: Height about to be drawn.
		on_new_page: Hook drawing the page chrome.
		safe_bottom: Lowest usable y, defaults to the page layout's.

	Returns:
		The same cursor, or a cursor at the top of a new page.
	"""
	if safe_bottom is None:
		safe_bottom = surface.layout.safe_bottom
	if cursor.y + needed > safe_bottom:
		return start_new_page(surface, cursor, on_new_page)
	return cursor


#============================================
def print_block(
	surface: hrep.surface.DrawingSurface,
	cursor: PageCursor,
	label: str,
	content: str | None,
	label_width: float = FLOW_LABEL_WIDTH,
	x: float | None = None,
	width: float | None = None,
	on_new_page: NewPageHook | None = None,
	safe_bottom: float | None = None,
	font_size: float = FLOW_FONT_SIZE,
	line_height: float = FLOW_LINE_HEIGHT,
	gap: float = FLOW_BLOCK_GAP,
) -> PageCursor:
	"""
	Print a "Label: wrapped value" block without splitting it across pages.

	The value is wrapped to the column right of the label first. When the
	whole block does not fit above the safe bottom a new page is started and
	the block is printed there. A block taller than a full page is still
	printed at the top of the fresh page and may run past the bottom.

	Args:
		surface: Drawing surface.
		cursor: Current cursor.
		label: Bold label text.
		content: Value text, blank values print nothing.
		label_width: Width of the label column in millimetres.
		x: Left edge, defaults to the page margin.
		width: Total block width, defaults to the content width.
		on_new_page: Hook drawing the page chrome.
		safe_bottom: Lowest usable y.
		font_size: Font size in points.
		line_height: Distance between wrapped lines.
		gap: Space added after the block.

	Returns:
		Cursor below the block.
	"""
	layout = surface.layout
	if x is None:
		x = layout.margin
	if width is None:
		width = layout.width - x - layout.margin
	lines = surface.measure_wrapped_lines(content or "", width - label_width, FONT_REGULAR, font_size)
	if not lines:
		return cursor
	block_height = len(lines) * line_height
	cursor = check_page_break(surface, cursor, block_height + gap, on_new_page, safe_bottom)

	surface.text(label, x, cursor.y, FONT_BOLD, font_size, COLOR_TEXT)
	surface.text_lines(lines, x + label_width, cursor.y, line_height, FONT_REGULAR, font_size, COLOR_TEXT)
	return PageCursor(y=cursor.y + block_height + gap, page_index=cursor.page_index)


#============================================
def print_lines(
	surface: hrep.surface.DrawingSurface,
	cursor: PageCursor,
	lines: list[str],
	x: float,
	font_name: str = FONT_REGULAR,
	font_size: float = FLOW_FONT_SIZE,
	color: str = COLOR_TEXT,
	line_height: float = FLOW_LINE_HEIGHT,
	on_new_page: NewPageHook | None = None,
	safe_bottom: float | None = None,
) -> PageCursor:
	"""
	Print pre-wrapped lines one at a time, breaking pages between lines.

	Returns:
		Cursor below the last line.
	"""
	for line in lines:
		cursor = check_page_break(surface, cursor, line_height, on_new_page, safe_bottom)
		surface.text(line, x, cursor.y, font_name, font_size, color)
		cursor = PageCursor(y=cursor.y + line_height, page_index=cursor.page_index)
	return cursor
