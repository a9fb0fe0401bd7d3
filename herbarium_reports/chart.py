"""
Horizontal bar chart geometry and drawing.
"""

# Standard Library
import dataclasses

# local repo modules
import herbarium_reports as hrep
import herbarium_reports.aggregate
import herbarium_reports.config
import herbarium_reports.surface


SeriesEntry = hrep.aggregate.SeriesEntry
ChartConfig = hrep.config.ChartConfig

FONT_REGULAR = hrep.config.FONT_REGULAR
FONT_BOLD = hrep.config.FONT_BOLD
COLOR_PRIMARY = hrep.config.COLOR_PRIMARY
COLOR_TEXT = hrep.config.COLOR_TEXT
COLOR_WHITE = hrep.config.COLOR_WHITE
ELLIPSIS = hrep.config.ELLIPSIS

TITLE_FONT_SIZE = 13
NAME_FONT_SIZE = 9
VALUE_FONT_SIZE = 8
# baseline offset of bar text from the bar top
TEXT_BASELINE = 6.0
VALUE_TEXT_ROOM = 15.0


@dataclasses.dataclass
class DrawingRegion:
	x: float
	y: float
	width: float
	height: float


@dataclasses.dataclass(frozen=True)
class BarGeometry:
	name: str
	label: str
	count: int
	y: float
	width: float
	value_inside: bool


@dataclasses.dataclass
class ChartLayout:
	title: str
	title_y: float
	label_x: float
	bar_x: float
	bars: list[BarGeometry]
	end_y: float


#============================================
def truncate_label(name: str, budget: int, keep: int) -> str:
	"""
	Shorten a bar label past a character budget.

	Args:
		name: Series entry name.
		budget: Longest name drawn unchanged.
		keep: Characters kept before the ellipsis.

	Returns:
		Label text.
	"""
	if len(name) > budget:
		return name[:keep] + ELLIPSIS
	return name


#============================================
def fold_series(series: list[SeriesEntry], max_bars: int) -> list[SeriesEntry]:
	"""
	Reduce a ranked series to at most max_bars entries.
	"""
	if len(series) <= max_bars:
		return list(series)
	return hrep.aggregate.top_n_plus_others(series, max_bars - 1)


#============================================
def chart_height(bar_count: int, config: ChartConfig | None = None) -> float:
	"""
	Vertical space used by a chart with bar_count bars, title included.

	Args:
		bar_count: Number of bars.
		config: Chart geometry.

	Returns:
		Height in millimetres.
	"""
	if config is None:
		config = hrep.config.build_chart_config()
	bar_count = min(bar_count, config.max_bars)
	return config.title_gap + bar_count * (config.bar_height + config.bar_gap) + config.trailing_gap


#============================================
def default_region(layout: hrep.config.PageLayout, top_y: float) -> DrawingRegion:
	"""
	Chart region spanning the page content width below top_y.
	"""
	return DrawingRegion(
		x=hrep.config.CHART_LABEL_X,
		y=top_y,
		width=layout.width - 2 * hrep.config.CHART_LABEL_X,
		height=layout.safe_bottom - top_y,
	)


#============================================
def compute_bar_layout(
	series: list[SeriesEntry],
	region: DrawingRegion,
	title: str = "",
	config: ChartConfig | None = None,
) -> ChartLayout:
	"""
	Compute bar positions, lengths and value placement.

	Bar length is proportional to count / max count, never shorter than the
	configured minimum width. The value sits inside the bar when the bar is
	wide enough, otherwise just past its end.

	Args:
		series: Ranked series, folded to the bar limit when longer.
		region: Drawing region, region.y is the title baseline.
		title: Chart title.
		config: Chart geometry.

	Returns:
		ChartLayout.
	"""
	if config is None:
		config = hrep.config.build_chart_config()
	entries = fold_series(series, config.max_bars)
	max_width = min(config.max_bar_width, region.width - config.label_column - VALUE_TEXT_ROOM)
	max_width = max(max_width, config.min_bar_width)
	max_count = max((entry.count for entry in entries), default=0) or 1

	bars_top = region.y + config.title_gap
	step = config.bar_height + config.bar_gap
	bars = []
	for index, entry in enumerate(entries):
		width = max((entry.count / max_count) * max_width, config.min_bar_width)
		bars.append(
			BarGeometry(
				name=entry.name,
				label=truncate_label(entry.name, config.name_budget, config.name_keep),
				count=entry.count,
				y=bars_top + index * step,
				width=width,
				value_inside=width > config.value_inside_min,
			)
		)
	return ChartLayout(
		title=title,
		title_y=region.y,
		label_x=region.x,
		bar_x=region.x + config.label_column,
		bars=bars,
		end_y=bars_top + len(bars) * step + config.trailing_gap,
	)


#============================================
def draw_bar_chart(
	surface: hrep.surface.DrawingSurface,
	series: list[SeriesEntry],
	top_y: float,
	title: str,
	config: ChartConfig | None = None,
	region: DrawingRegion | None = None,
) -> float:
	"""
	Draw a titled horizontal bar chart.

	Callers skip the call for an empty series and draw a notice instead.

	Args:
		surface: Drawing surface.
		series: Ranked series.
		top_y: Title baseline in millimetres.
		title: Chart title.
		config: Chart geometry.
		region: Drawing region, defaults to the page content width.

	Returns:
		The y immediately below the chart.
	"""
	if config is None:
		config = hrep.config.build_chart_config()
	if region is None:
		region = default_region(surface.layout, top_y)
	chart = compute_bar_layout(series, region, title, config)

	surface.text(
		chart.title,
		region.x + region.width / 2,
		chart.title_y,
		FONT_BOLD,
		TITLE_FONT_SIZE,
		COLOR_TEXT,
		"CENTER",
	)
	for bar in chart.bars:
		surface.text(bar.label, chart.label_x, bar.y + TEXT_BASELINE, FONT_REGULAR, NAME_FONT_SIZE, COLOR_TEXT)
		surface.rect(
			chart.bar_x,
			bar.y,
			bar.width,
			config.bar_height,
			stroke_color="",
			fill_color=COLOR_PRIMARY,
			radius=hrep.config.CHART_BAR_RADIUS,
		)
		value = str(bar.count)
		if bar.value_inside:
			surface.text(
				value,
				chart.bar_x + bar.width - config.value_padding,
				bar.y + TEXT_BASELINE,
				FONT_BOLD,
				VALUE_FONT_SIZE,
				COLOR_WHITE,
				"RIGHT",
			)
		else:
			surface.text(
				value,
				chart.bar_x + bar.width + config.value_padding,
				bar.y + TEXT_BASELINE,
				FONT_BOLD,
				VALUE_FONT_SIZE,
				COLOR_TEXT,
			)
	return chart.end_y
