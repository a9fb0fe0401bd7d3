"""
Herbarium label sheet: a fixed 2 x 2 grid of specimen cards per A4 page.
"""

# Standard Library
import dataclasses
import math
import typing

# local repo modules
import herbarium_reports as hrep
import herbarium_reports.config
import herbarium_reports.records
import herbarium_reports.surface


GridConfig = hrep.config.GridConfig
clean_text = hrep.records.clean_text

LABEL_FONT_REGULAR = hrep.config.LABEL_FONT_REGULAR
LABEL_FONT_BOLD = hrep.config.LABEL_FONT_BOLD
LABEL_FONT_BOLD_ITALIC = hrep.config.LABEL_FONT_BOLD_ITALIC
COLOR_BLACK = hrep.config.COLOR_BLACK
ELLIPSIS = hrep.config.ELLIPSIS

FIELD_FONT_SIZE = 9
# x offsets inside a card
LEFT_INSET = 5.0
VALUE_INSET = 18.0
FOOTER_VALUE_INSET = 14.0


@dataclasses.dataclass
class LabelCard:
	scientific_name: str
	family: str
	author: str | None = None
	popular_name: str | None = None
	determiner: str | None = None
	determination_date: str | None = None
	location: str | None = None
	coordinates: str | None = None
	habitat: str | None = None
	morphology: str | None = None
	notes: str | None = None
	collector: str | None = None
	collector_number: str | None = None
	collection_date: str | None = None
	accession: str | None = None

	@property
	def description(self) -> str:
		"""
		Free text block assembled from morphology and notes.
		"""
		parts = [part for part in (self.morphology, self.notes) if part]
		return ". ".join(parts)


@dataclasses.dataclass(frozen=True)
class GridPosition:
	page_index: int
	col: int
	row: int


@dataclasses.dataclass
class CardLayout:
	position: GridPosition
	x: float
	y: float
	description_lines: list[str]
	max_description_lines: int
	truncated: bool
	description_dropped: bool = False


#============================================
def build_label_card(data: dict) -> LabelCard:
	"""
	Build a label card from a specimen dict.

	Args:
		data: Dict keyed by the LabelCard field names.

	Returns:
		LabelCard.
	"""
	data = hrep.records.require_mapping(data, "label")
	values = {}
	for field in dataclasses.fields(LabelCard):
		values[field.name] = clean_text(data.get(field.name))
	values["scientific_name"] = values["scientific_name"] or ""
	values["family"] = values["family"] or hrep.config.NO_FAMILY_LABEL
	return LabelCard(**values)


#============================================
def iter_grid_positions(count: int, grid: GridConfig | None = None) -> typing.Iterator[GridPosition]:
	"""
	Yield the grid cell of each card in order.

	Cards fill a row left to right, then the next row. A full page of cells
	starts a new page at (0, 0).

	Args:
		count: Number of cards.
		grid: Grid geometry.

	Yields:
		GridPosition with a one-based page index.
	"""
	if grid is None:
		grid = hrep.config.build_grid_config()
	per_page = grid.columns * grid.rows
	page_index = 1
	col = 0
	row = 0
	for index in range(count):
		if index > 0 and index % per_page == 0:
			page_index += 1
			col = 0
			row = 0
		yield GridPosition(page_index=page_index, col=col, row=row)
		col += 1
		if col >= grid.columns:
			col = 0
			row += 1


#============================================
def cell_origin(position: GridPosition, grid: GridConfig) -> tuple[float, float]:
	"""
	Top-left corner of a grid cell in millimetres.
	"""
	x = grid.margin + position.col * (grid.label_width + grid.gap)
	y = grid.margin + position.row * (grid.label_height + grid.gap)
	return (x, y)


#============================================
def max_description_lines(
	current_y: float,
	card_y: float,
	grid: GridConfig,
	line_height: float | None = None,
) -> int:
	"""
	Number of text lines fitting above the card footer.

	Args:
		current_y: Baseline where the text would start.
		card_y: Top edge of the card.
		grid: Grid geometry.
		line_height: Line step, defaults to the grid line height.

	Returns:
		Line count, never negative.
	"""
	if line_height is None:
		line_height = grid.line_height
	footer_start = card_y + grid.label_height - grid.footer_reserve
	return max(0, math.floor((footer_start - current_y) / line_height))


#============================================
def fit_description(lines: list[str], max_lines: int) -> tuple[list[str], bool]:
	"""
	Cut wrapped lines to max_lines.

	When lines are dropped, the last 3 characters of the final kept line are
	replaced by an ellipsis.

	Args:
		lines: Wrapped description lines.
		max_lines: Line budget.

	Returns:
		Tuple of (kept lines, truncated flag).
	"""
	if len(lines) <= max_lines:
		return (list(lines), False)
	kept = list(lines[:max(0, max_lines)])
	if kept:
		last = kept[-1]
		if len(last) > 3:
			kept[-1] = last[:-3] + ELLIPSIS
		else:
			kept[-1] = ELLIPSIS
	return (kept, True)


#============================================
def collector_text(card: LabelCard, budget: int = hrep.config.LABEL_COLLECTOR_BUDGET) -> str:
	"""
	Footer collector line with its collector number.
	"""
	text = card.collector or hrep.config.NOT_INFORMED_LABEL
	if card.collector_number:
		text += f"  No: {card.collector_number}"
	if len(text) > budget:
		text = text[:budget - 3] + ELLIPSIS
	return text


#============================================
def draw_label_card(
	surface: hrep.surface.DrawingSurface,
	card: LabelCard,
	position: GridPosition,
	grid: GridConfig | None = None,
) -> CardLayout:
	"""
	Draw one card into its grid cell on the current page.

	Args:
		surface: Drawing surface.
		card: Label card.
		position: Grid cell.
		grid: Grid geometry.

	Returns:
		CardLayout describing the fitted description.
	"""
	if grid is None:
		grid = hrep.config.build_grid_config()
	x, y = cell_origin(position, grid)
	width = grid.label_width
	height = grid.label_height
	center_x = x + width / 2
	left = x + LEFT_INSET
	value_x = x + VALUE_INSET
	text_width = width - 2 * LEFT_INSET
	value_width = width - 20
	line_height = grid.line_height

	surface.rect(x, y, width, height, stroke_color=COLOR_BLACK, line_width=0.4)
	surface.text(hrep.config.LABEL_BRAND_LINE, center_x, y + 10, LABEL_FONT_BOLD, 12, COLOR_BLACK, "CENTER")
	surface.text(hrep.config.LABEL_SUB_BRAND_LINE, center_x, y + 15, LABEL_FONT_REGULAR, 10, COLOR_BLACK, "CENTER")
	surface.line(x + LEFT_INSET, y + 18, x + width - LEFT_INSET, y + 18, COLOR_BLACK, 0.2)
	if card.accession:
		surface.text(card.accession, x + width - LEFT_INSET, y + 8, LABEL_FONT_BOLD, FIELD_FONT_SIZE, COLOR_BLACK, "RIGHT")

	current_y = y + 24
	surface.text(card.family.upper(), center_x, current_y, LABEL_FONT_BOLD, 11, COLOR_BLACK, "CENTER")
	current_y += 6

	name_text = card.scientific_name
	if card.author:
		name_text += f" {card.author}"
	name_lines = surface.measure_wrapped_lines(name_text, text_width, LABEL_FONT_BOLD_ITALIC, 11)
	name_lines, _ = fit_description(name_lines, max_description_lines(current_y, y, grid, 5))
	surface.text_lines(name_lines, center_x, current_y, 5, LABEL_FONT_BOLD_ITALIC, 11, COLOR_BLACK, "CENTER")
	current_y += len(name_lines) * 5 + 2

	if card.popular_name:
		popular_lines = surface.measure_wrapped_lines(
			f"Popular Name: {card.popular_name}", text_width, LABEL_FONT_REGULAR, 10
		)
		popular_lines, _ = fit_description(popular_lines, max_description_lines(current_y, y, grid, 5))
		surface.text_lines(popular_lines, left, current_y, 5, LABEL_FONT_REGULAR, 10, COLOR_BLACK)
		current_y += len(popular_lines) * 5 + 2
	else:
		current_y += 2

	determiner = card.determiner or hrep.config.LABEL_DEFAULT_DETERMINER
	if card.determination_date:
		determiner += f"  Date: {card.determination_date}"
	if max_description_lines(current_y, y, grid) > 0:
		surface.text("Det.:", left, current_y, LABEL_FONT_BOLD, FIELD_FONT_SIZE, COLOR_BLACK)
		surface.text(determiner, value_x, current_y, LABEL_FONT_REGULAR, FIELD_FONT_SIZE, COLOR_BLACK)
		current_y += line_height

	location = card.location or hrep.config.NOT_INFORMED_LABEL
	if card.coordinates:
		location += f"  {card.coordinates}"
	current_y = draw_wrapped_field(
		surface, "Loc.:", location, left, value_x, current_y, value_width, line_height,
		max_description_lines(current_y, y, grid),
	)
	if card.habitat:
		current_y = draw_wrapped_field(
			surface, "Hab.:", card.habitat, left, value_x, current_y, value_width, line_height,
			max_description_lines(current_y, y, grid),
		)

	description_lines: list[str] = []
	max_lines = max_description_lines(current_y, y, grid)
	truncated = False
	dropped = False
	if card.description:
		if max_lines == 0:
			# no room left above the footer
			dropped = True
		else:
			wrapped = surface.measure_wrapped_lines(card.description, value_width, LABEL_FONT_REGULAR, FIELD_FONT_SIZE)
			description_lines, truncated = fit_description(wrapped, max_lines)
			surface.text("Descr.:", left, current_y, LABEL_FONT_BOLD, FIELD_FONT_SIZE, COLOR_BLACK)
			surface.text_lines(
				description_lines, value_x, current_y, line_height, LABEL_FONT_REGULAR, FIELD_FONT_SIZE, COLOR_BLACK
			)

	# footer is anchored to the card bottom whatever the description used
	footer_y = y + height - grid.footer_offset
	surface.text("Coll.:", left, footer_y, LABEL_FONT_BOLD, FIELD_FONT_SIZE, COLOR_BLACK)
	surface.text(collector_text(card), x + FOOTER_VALUE_INSET, footer_y, LABEL_FONT_REGULAR, FIELD_FONT_SIZE, COLOR_BLACK)
	surface.text("Date:", left, footer_y + 5, LABEL_FONT_BOLD, FIELD_FONT_SIZE, COLOR_BLACK)
	surface.text(
		card.collection_date or "",
		x + FOOTER_VALUE_INSET,
		footer_y + 5,
		LABEL_FONT_REGULAR,
		FIELD_FONT_SIZE,
		COLOR_BLACK,
	)

	return CardLayout(
		position=position,
		x=x,
		y=y,
		description_lines=description_lines,
		max_description_lines=max_lines,
		truncated=truncated,
		description_dropped=dropped,
	)


#============================================
def draw_wrapped_field(
	surface: hrep.surface.DrawingSurface,
	label: str,
	value: str,
	label_x: float,
	value_x: float,
	y: float,
	width: float,
	line_height: float,
	max_lines: int | None = None,
) -> float:
	"""
	Draw a bold label with a wrapped value and return the next baseline.

	When max_lines is given the value is cut to that many lines.
	"""
	lines = surface.measure_wrapped_lines(value, width, LABEL_FONT_REGULAR, FIELD_FONT_SIZE)
	if max_lines is not None:
		lines, _ = fit_description(lines, max_lines)
	if not lines:
		return y
	surface.text(label, label_x, y, LABEL_FONT_BOLD, FIELD_FONT_SIZE, COLOR_BLACK)
	surface.text_lines(lines, value_x, y, line_height, LABEL_FONT_REGULAR, FIELD_FONT_SIZE, COLOR_BLACK)
	return y + len(lines) * line_height


#============================================
def compose_label_sheet(
	cards: list[LabelCard],
	grid: GridConfig | None = None,
) -> tuple[hrep.surface.DrawingSurface, list[CardLayout]]:
	"""
	Lay out every card on a grid of A4 pages.

	Args:
		cards: Label cards in print order.
		grid: Grid geometry.

	Returns:
		Tuple of (drawing surface, per-card layouts).
	"""
	if grid is None:
		grid = hrep.config.build_grid_config()
	surface = hrep.surface.DrawingSurface()
	layouts = []
	for card, position in zip(cards, iter_grid_positions(len(cards), grid)):
		while surface.page_count() < position.page_index:
			surface.add_page()
		layouts.append(draw_label_card(surface, card, position, grid))
	return (surface, layouts)
