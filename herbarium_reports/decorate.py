"""
Page chrome: cover page, running header, corporate header and footers.
"""

# PIP3 modules
import reportlab.lib.utils

# local repo modules
import herbarium_reports as hrep
import herbarium_reports.config
import herbarium_reports.surface


ReportContext = hrep.config.ReportContext

FONT_REGULAR = hrep.config.FONT_REGULAR
FONT_BOLD = hrep.config.FONT_BOLD
FONT_ITALIC = hrep.config.FONT_ITALIC
COLOR_PRIMARY = hrep.config.COLOR_PRIMARY
COLOR_TEXT = hrep.config.COLOR_TEXT
COLOR_TEXT_LIGHT = hrep.config.COLOR_TEXT_LIGHT
COLOR_FOOTER_RULE = hrep.config.COLOR_FOOTER_RULE
COLOR_NOTICE_FILL = hrep.config.COLOR_NOTICE_FILL
COLOR_NOTICE_BORDER = hrep.config.COLOR_NOTICE_BORDER

FOOTER_TAG = "footer"

COVER_LOGO_SIZE = 35.0
COVER_LOGO_Y = 40.0
COVER_PRODUCT_Y = 90.0
COVER_TITLE_Y = 102.0
COVER_STATS_OFFSET = 40.0
COVER_STAT_COLUMN_OFFSET = 40.0
COVER_STAT_ROW_STEP = 25.0

CORPORATE_LOGO_X = 14.0
CORPORATE_LOGO_Y = 10.0
CORPORATE_LOGO_SIZE = 18.0
CORPORATE_TEXT_X = 38.0
CORPORATE_DIVIDER_Y = 32.0

NOTICE_BOX_HEIGHT = 20.0


#============================================
def draw_cover(
	surface: hrep.surface.DrawingSurface,
	ctx: ReportContext,
	stats: list[tuple[str, int | str]],
	subtitle: str | None = None,
	data_source: str = hrep.config.DEFAULT_DATA_SOURCE,
	logo: reportlab.lib.utils.ImageReader | None = None,
	stats_offset: float = COVER_STATS_OFFSET,
) -> None:
	"""
	Draw the full page cover on the current page.

	Statistics are laid out in two columns around the page center, filled
	row by row.

	Args:
		surface: Drawing surface.
		ctx: Report context.
		stats: (label, value) pairs.
		subtitle: Optional line under the title.
		data_source: Attribution line near the bottom.
		logo: Decoded logo, skipped when None.
		stats_offset: Gap between the timestamp line and the statistics grid.
	"""
	center_x = surface.page_width / 2
	if logo is not None:
		surface.image(logo, center_x - COVER_LOGO_SIZE / 2, COVER_LOGO_Y, COVER_LOGO_SIZE, COVER_LOGO_SIZE)
	surface.text(hrep.config.PRODUCT_NAME, center_x, COVER_PRODUCT_Y, FONT_BOLD, 26, COLOR_PRIMARY, "CENTER")
	surface.text(ctx.title, center_x, COVER_TITLE_Y, FONT_REGULAR, 14, COLOR_TEXT_LIGHT, "CENTER")
	y = COVER_TITLE_Y
	if subtitle:
		y += 8
		surface.text(subtitle, center_x, y, FONT_REGULAR, 12, COLOR_TEXT_LIGHT, "CENTER")
	y += 10
	surface.text(f"Generated on: {ctx.stamp}", center_x, y, FONT_REGULAR, 10, COLOR_TEXT_LIGHT, "CENTER")

	y += stats_offset
	for index, (label, value) in enumerate(stats):
		column = index % 2
		row = index // 2
		stat_x = center_x - COVER_STAT_COLUMN_OFFSET + column * 2 * COVER_STAT_COLUMN_OFFSET
		stat_y = y + row * COVER_STAT_ROW_STEP
		surface.text(str(value), stat_x, stat_y, FONT_BOLD, 18, COLOR_PRIMARY, "CENTER")
		surface.text(label, stat_x, stat_y + 6, FONT_REGULAR, 9, COLOR_TEXT_LIGHT, "CENTER")

	page_height = surface.page_height
	surface.text(f"Data Source: {data_source}", center_x, page_height - 40, FONT_ITALIC, 9, COLOR_TEXT_LIGHT, "CENTER")
	surface.text(f"Generated by: {ctx.generated_by}", center_x, page_height - 30, FONT_REGULAR, 9, COLOR_TEXT_LIGHT, "CENTER")


#============================================
def draw_running_header(
	surface: hrep.surface.DrawingSurface,
	ctx: ReportContext,
	title: str | None = None,
) -> float:
	"""
	Draw the compact one line header of a content page.

	Args:
		surface: Drawing surface.
		ctx: Report context.
		title: Short title, defaults to the context title.

	Returns:
		The y below the header rule.
	"""
	y = hrep.config.RUNNING_HEADER_Y
	margin = surface.layout.margin
	right = surface.page_width - margin
	surface.text(title or ctx.title, margin, y, FONT_BOLD, 10, COLOR_PRIMARY)
	surface.text(ctx.stamp, right, y, FONT_REGULAR, 8, COLOR_TEXT_LIGHT, "RIGHT")
	rule_y = y + hrep.config.RUNNING_HEADER_RULE_OFFSET
	surface.line(margin, rule_y, right, rule_y, COLOR_PRIMARY, 0.5)
	return y + hrep.config.RUNNING_HEADER_HEIGHT


#============================================
def draw_corporate_header(
	surface: hrep.surface.DrawingSurface,
	ctx: ReportContext,
	title: str | None = None,
	subtitle: str | None = None,
	logo: reportlab.lib.utils.ImageReader | None = None,
) -> float:
	"""
	Draw the branded header used by single record documents.

	Args:
		surface: Drawing surface.
		ctx: Report context.
		title: Right aligned document title, defaults to the context title.
		subtitle: Optional line below the divider.
		logo: Decoded logo, skipped when None.

	Returns:
		The y where content starts.
	"""
	margin = surface.layout.margin
	right = surface.page_width - margin
	if logo is not None:
		surface.image(logo, CORPORATE_LOGO_X, CORPORATE_LOGO_Y, CORPORATE_LOGO_SIZE, CORPORATE_LOGO_SIZE)
	surface.text(hrep.config.PRODUCT_NAME, CORPORATE_TEXT_X, 18, FONT_BOLD, 18, COLOR_PRIMARY)
	surface.text(hrep.config.PRODUCT_TAGLINE, CORPORATE_TEXT_X, 25, FONT_REGULAR, 9, COLOR_TEXT_LIGHT)

	surface.text(title or ctx.title, right, 15, FONT_BOLD, 10, COLOR_TEXT, "RIGHT")
	surface.text(f"Generated by: {ctx.generated_by_role or ctx.generated_by}", right, 21, FONT_REGULAR, 8, COLOR_TEXT_LIGHT, "RIGHT")
	surface.text(f"Date: {ctx.stamp}", right, 26, FONT_REGULAR, 8, COLOR_TEXT_LIGHT, "RIGHT")

	surface.line(margin, CORPORATE_DIVIDER_Y, right, CORPORATE_DIVIDER_Y, COLOR_PRIMARY, 0.8)
	if subtitle:
		surface.text(subtitle, margin, 40, FONT_BOLD, 12, COLOR_TEXT)
		return 48.0
	return 42.0


#============================================
def draw_notice_box(
	surface: hrep.surface.DrawingSurface,
	y: float,
	message: str,
	height: float = NOTICE_BOX_HEIGHT,
) -> float:
	"""
	Draw a bordered "no data" notice across the content width.

	Returns:
		The y below the box.
	"""
	margin = surface.layout.margin
	width = surface.page_width - 2 * margin
	surface.rect(
		margin,
		y,
		width,
		height,
		stroke_color=COLOR_NOTICE_BORDER,
		fill_color=COLOR_NOTICE_FILL,
		radius=2.0,
	)
	surface.text(message, surface.page_width / 2, y + height / 2 + 1.5, FONT_ITALIC, 10, COLOR_TEXT_LIGHT, "CENTER")
	return y + height + 10


#============================================
def stamp_footers(
	surface: hrep.surface.DrawingSurface,
	notice: str = hrep.config.CONFIDENTIAL_NOTICE,
	first_page: int = 2,
	rule_offset: float = hrep.config.FOOTER_RULE_OFFSET,
	text_offset: float = hrep.config.FOOTER_TEXT_OFFSET,
) -> int:
	"""
	Second pass drawing the footer on every page from first_page on.

	Runs after all content is laid out since "Page i of N" needs the final
	page count. Footers from an earlier call are replaced, not duplicated.

	Args:
		surface: Drawing surface.
		notice: Left aligned footer text.
		first_page: First one-based page index to stamp.
		rule_offset: Distance of the footer rule from the bottom edge.
		text_offset: Distance of the footer baseline from the bottom edge.

	Returns:
		Number of stamped pages.
	"""
	surface.discard_tagged(FOOTER_TAG)
	total = surface.page_count()
	margin = surface.layout.margin
	right = surface.page_width - margin
	rule_y = surface.page_height - rule_offset
	text_y = surface.page_height - text_offset
	stamped = 0
	with surface.tagged(FOOTER_TAG):
		for index in range(max(1, first_page), total + 1):
			surface.set_current_page(index)
			surface.line(margin, rule_y, right, rule_y, COLOR_FOOTER_RULE, 0.3)
			surface.text(notice, margin, text_y, FONT_REGULAR, 8, COLOR_TEXT_LIGHT)
			surface.text(f"Page {index} of {total}", right, text_y, FONT_REGULAR, 8, COLOR_TEXT_LIGHT, "RIGHT")
			stamped += 1
	surface.set_current_page(total)
	return stamped
