"""
Shared configuration and constants.
"""

# Standard Library
import dataclasses
import datetime


POINTS_PER_INCH = 72.0
MM_PER_INCH = 25.4

PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0
PAGE_MARGIN = 14.0

PRODUCT_NAME = "Veridia Saber"
PRODUCT_TAGLINE = "Botanical Collection Management System"
CONFIDENTIAL_NOTICE = "Veridia Saber - Confidential Document"
INTERNAL_NOTICE = "Veridia Saber - Internal Document"
DEFAULT_GENERATED_BY = "System"
DEFAULT_DATA_SOURCE = "Veridia Saber DB"

COLOR_PRIMARY = "#064E3B"
COLOR_SECONDARY = "#10B981"
COLOR_TEXT = "#1F2937"
COLOR_TEXT_LIGHT = "#6B7280"
COLOR_WHITE = "#FFFFFF"
COLOR_ZEBRA = "#F9FAFB"
COLOR_NOTICE_FILL = "#F3F4F6"
COLOR_NOTICE_BORDER = "#D1D5DB"
COLOR_FOOTER_RULE = "#C8C8C8"
COLOR_TABLE_RULE = "#E5E7EB"
COLOR_PLACEHOLDER_FILL = "#F5F5F5"
COLOR_LEGACY_HEADER = "#646464"
COLOR_BLACK = "#000000"

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
FONT_ITALIC = "Helvetica-Oblique"
FONT_BOLD_ITALIC = "Helvetica-BoldOblique"
LABEL_FONT_REGULAR = "Times-Roman"
LABEL_FONT_BOLD = "Times-Bold"
LABEL_FONT_BOLD_ITALIC = "Times-BoldItalic"

DATE_FORMAT = "%d/%m/%Y"
DATETIME_FORMAT = "%d/%m/%Y %H:%M"

# running header and footer
RUNNING_HEADER_Y = 15.0
RUNNING_HEADER_RULE_OFFSET = 3.0
RUNNING_HEADER_HEIGHT = 10.0
CONTENT_TOP_GAP = 5.0
FOOTER_RULE_OFFSET = 14.0
FOOTER_TEXT_OFFSET = 8.0
SAFE_BOTTOM_OFFSET = 35.0

# flow writer
FLOW_LINE_HEIGHT = 5.0
FLOW_BLOCK_GAP = 3.0
FLOW_LABEL_WIDTH = 35.0
FLOW_MARGIN = 16.0
FLOW_FONT_SIZE = 10.0

# bar chart
CHART_BAR_HEIGHT = 9.0
CHART_BAR_GAP = 3.0
CHART_MAX_BAR_WIDTH = 90.0
CHART_MIN_BAR_WIDTH = 5.0
CHART_LABEL_COLUMN = 49.0
CHART_LABEL_X = 16.0
CHART_NAME_BUDGET = 22
CHART_NAME_KEEP = 20
CHART_VALUE_INSIDE_MIN = 20.0
CHART_VALUE_PADDING = 3.0
CHART_TITLE_GAP = 10.0
CHART_TRAILING_GAP = 10.0
CHART_MIN_HEIGHT = 80.0
CHART_MAX_BARS = 15
CHART_BAR_RADIUS = 1.0
OTHERS_LABEL = "Others"

# label grid
LABEL_WIDTH = 90.0
LABEL_HEIGHT = 130.0
LABEL_MARGIN = 10.0
LABEL_GAP = 10.0
LABEL_COLUMNS = 2
LABEL_ROWS = 2
LABEL_LINE_HEIGHT = 4.5
LABEL_FOOTER_RESERVE = 14.0
LABEL_FOOTER_OFFSET = 12.0
LABEL_COLLECTOR_BUDGET = 35
LABEL_BRAND_LINE = "FLORA DO BRASIL"
LABEL_SUB_BRAND_LINE = "Veridia Saber - Digital Herbarium"
LABEL_DEFAULT_DETERMINER = "Veridia System"
ELLIPSIS = "..."

# table
TABLE_FONT_SIZE = 9.0
TABLE_CELL_PADDING = 1.5
TABLE_TITLE_GAP = 5.0
TABLE_TITLE_RESERVE = 20.0

NO_FAMILY_LABEL = "No Family"
UNKNOWN_LABEL = "Unknown"
UNDETERMINED_LABEL = "Undetermined"
NO_COLLECTOR_LABEL = "No Collector"
NOT_INFORMED_LABEL = "Not informed"

FIELD_NOTES_ROLES = {
	"Collection Manager",
	"Gestor de Acervo",
}


@dataclasses.dataclass
class PageLayout:
	width: float
	height: float
	margin: float
	safe_bottom: float
	content_top: float


@dataclasses.dataclass
class ChartConfig:
	bar_height: float
	bar_gap: float
	max_bar_width: float
	min_bar_width: float
	label_column: float
	name_budget: int
	name_keep: int
	value_inside_min: float
	value_padding: float
	title_gap: float
	trailing_gap: float
	min_height: float
	max_bars: int


@dataclasses.dataclass
class GridConfig:
	label_width: float
	label_height: float
	margin: float
	gap: float
	columns: int
	rows: int
	line_height: float
	footer_reserve: float
	footer_offset: float


@dataclasses.dataclass
class TableStyleConfig:
	font_size: float
	cell_padding: float
	header_fill: str
	header_text: str
	zebra_fill: str
	text_color: str
	rule_color: str


@dataclasses.dataclass(frozen=True)
class ReportContext:
	title: str
	generated_by_name: str | None
	generated_by_role: str | None
	generation_timestamp: datetime.datetime

	@property
	def generated_by(self) -> str:
		"""
		Provenance line value, preferring the user name over the role.
		"""
		return self.generated_by_name or self.generated_by_role or DEFAULT_GENERATED_BY

	@property
	def stamp(self) -> str:
		"""
		Locale formatted generation timestamp.
		"""
		return self.generation_timestamp.strftime(DATETIME_FORMAT)


@dataclasses.dataclass
class ReportResult:
	kind: str
	pages: int
	record_count: int
	table_rows: list[list[str]]
	charts: list[str]
	notice_drawn: bool


#============================================
def mm_to_points(value: float) -> float:
	"""
	Convert millimetres to points.

	Args:
		value: Millimetre value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_INCH / MM_PER_INCH


#============================================
def build_page_layout() -> PageLayout:
	"""
	Build the default A4 portrait page layout.

	Returns:
		PageLayout.
	"""
	return PageLayout(
		width=PAGE_WIDTH,
		height=PAGE_HEIGHT,
		margin=PAGE_MARGIN,
		safe_bottom=PAGE_HEIGHT - SAFE_BOTTOM_OFFSET,
		content_top=RUNNING_HEADER_Y + RUNNING_HEADER_HEIGHT + CONTENT_TOP_GAP,
	)


#============================================
def build_chart_config() -> ChartConfig:
	"""
	Build the default horizontal bar chart geometry.

	Returns:
		ChartConfig.
	"""
	return ChartConfig(
		bar_height=CHART_BAR_HEIGHT,
		bar_gap=CHART_BAR_GAP,
		max_bar_width=CHART_MAX_BAR_WIDTH,
		min_bar_width=CHART_MIN_BAR_WIDTH,
		label_column=CHART_LABEL_COLUMN,
		name_budget=CHART_NAME_BUDGET,
		name_keep=CHART_NAME_KEEP,
		value_inside_min=CHART_VALUE_INSIDE_MIN,
		value_padding=CHART_VALUE_PADDING,
		title_gap=CHART_TITLE_GAP,
		trailing_gap=CHART_TRAILING_GAP,
		min_height=CHART_MIN_HEIGHT,
		max_bars=CHART_MAX_BARS,
	)


#============================================
def build_grid_config() -> GridConfig:
	"""
	Build the default 2 x 2 herbarium label grid.

	Returns:
		GridConfig.
	"""
	return GridConfig(
		label_width=LABEL_WIDTH,
		label_height=LABEL_HEIGHT,
		margin=LABEL_MARGIN,
		gap=LABEL_GAP,
		columns=LABEL_COLUMNS,
		rows=LABEL_ROWS,
		line_height=LABEL_LINE_HEIGHT,
		footer_reserve=LABEL_FOOTER_RESERVE,
		footer_offset=LABEL_FOOTER_OFFSET,
	)


#============================================
def build_table_style() -> TableStyleConfig:
	"""
	Build the default table styling.

	Returns:
		TableStyleConfig.
	"""
	return TableStyleConfig(
		font_size=TABLE_FONT_SIZE,
		cell_padding=TABLE_CELL_PADDING,
		header_fill=COLOR_PRIMARY,
		header_text=COLOR_WHITE,
		zebra_fill=COLOR_ZEBRA,
		text_color=COLOR_TEXT,
		rule_color=COLOR_TABLE_RULE,
	)


#============================================
def build_context(
	title: str,
	user_name: str | None = None,
	user_role: str | None = None,
	timestamp: datetime.datetime | None = None,
) -> ReportContext:
	"""
	Build an immutable report context.

	Args:
		title: Report title.
		user_name: Name of the requesting user.
		user_role: Role of the requesting user.
		timestamp: Generation time, defaults to now.

	Returns:
		ReportContext.
	"""
	if timestamp is None:
		timestamp = datetime.datetime.now()
	return ReportContext(
		title=title,
		generated_by_name=user_name,
		generated_by_role=user_role,
		generation_timestamp=timestamp,
	)
