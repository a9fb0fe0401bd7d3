"""
Paginated tables built on reportlab.platypus.Table.

Tables are split against the space left on the current page. Each part is
recorded on the drawing surface as a flowable and a caller hook redraws the
page chrome whenever the table spills onto a new page.
"""

# Standard Library
import dataclasses
import typing
import xml.sax.saxutils

# PIP3 modules
import reportlab.lib.colors
import reportlab.lib.enums
import reportlab.lib.styles
import reportlab.platypus

# local repo modules
import herbarium_reports as hrep
import herbarium_reports.config
import herbarium_reports.surface


mm_to_points = hrep.config.mm_to_points

FONT_REGULAR = hrep.config.FONT_REGULAR
FONT_BOLD = hrep.config.FONT_BOLD
FONT_ITALIC = hrep.config.FONT_ITALIC
PLACEHOLDER_TEXT = "No records found."

ALIGNMENTS = {
	"LEFT": reportlab.lib.enums.TA_LEFT,
	"CENTER": reportlab.lib.enums.TA_CENTER,
	"RIGHT": reportlab.lib.enums.TA_RIGHT,
}

NewPageHook = typing.Callable[[hrep.surface.DrawingSurface], float]


@dataclasses.dataclass
class ColumnSpec:
	header: str
	width: float | None = None
	font_name: str = FONT_REGULAR
	align: str = "LEFT"
	color: str | None = None


@dataclasses.dataclass
class TableLayout:
	end_y: float
	parts: int
	pages: list[int]
	row_count: int


#============================================
def resolve_column_widths(columns: list[ColumnSpec], total_width: float) -> list[float]:
	"""
	Resolve fixed and automatic column widths.

	Columns without a width share what the fixed columns leave over.

	Args:
		columns: Column specs.
		total_width: Table width in millimetres.

	Returns:
		Column widths in millimetres.
	"""
	fixed = sum(column.width for column in columns if column.width is not None)
	auto_count = sum(1 for column in columns if column.width is None)
	auto_width = 0.0
	if auto_count:
		auto_width = max(10.0, (total_width - fixed) / auto_count)
	widths = []
	for column in columns:
		if column.width is None:
			widths.append(auto_width)
		else:
			widths.append(column.width)
	return widths


#============================================
def build_cell_style(
	name: str,
	font_name: str,
	font_size: float,
	color: str,
	align: str,
) -> reportlab.lib.styles.ParagraphStyle:
	"""
	Build the paragraph style for one column.
	"""
	return reportlab.lib.styles.ParagraphStyle(
		name,
		fontName=font_name,
		fontSize=font_size,
		leading=font_size * 1.2,
		textColor=reportlab.lib.colors.HexColor(color),
		alignment=ALIGNMENTS.get(align.upper(), reportlab.lib.enums.TA_LEFT),
	)


#============================================
def build_table(
	columns: list[ColumnSpec],
	rows: list[list[str]],
	width: float,
	style: hrep.config.TableStyleConfig | None = None,
	header_fill: str | None = None,
	placeholder: str = PLACEHOLDER_TEXT,
) -> reportlab.platypus.Table:
	"""
	Build a styled table with a repeating header row.

	Args:
		columns: Column specs.
		rows: Body rows as strings, one entry per column.
		width: Table width in millimetres.
		style: Table style, defaults to build_table_style().
		header_fill: Override for the header background color.
		placeholder: Text of the spanning row used when rows is empty.

	Returns:
		Platypus Table.
	"""
	if not columns:
		raise ValueError("A table needs at least one column")
	if style is None:
		style = hrep.config.build_table_style()
	if header_fill is None:
		header_fill = style.header_fill

	header_style = build_cell_style("th", FONT_BOLD, style.font_size, style.header_text, "LEFT")
	column_styles = []
	for index, column in enumerate(columns):
		column_styles.append(
			build_cell_style(
				f"td{index}",
				column.font_name,
				style.font_size,
				column.color or style.text_color,
				column.align,
			)
		)

	data = [[
		reportlab.platypus.Paragraph(xml.sax.saxutils.escape(column.header), header_style)
		for column in columns
	]]
	commands = [
		("BACKGROUND", (0, 0), (-1, 0), reportlab.lib.colors.HexColor(header_fill)),
		("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
		("LINEBELOW", (0, 0), (-1, -1), 0.25, reportlab.lib.colors.HexColor(style.rule_color)),
		("LEFTPADDING", (0, 0), (-1, -1), mm_to_points(style.cell_padding)),
		("RIGHTPADDING", (0, 0), (-1, -1), mm_to_points(style.cell_padding)),
		("TOPPADDING", (0, 0), (-1, -1), mm_to_points(style.cell_padding)),
		("BOTTOMPADDING", (0, 0), (-1, -1), mm_to_points(style.cell_padding)),
	]

	if rows:
		for row in rows:
			cells = []
			for index, column_style in enumerate(column_styles):
				value = row[index] if index < len(row) else ""
				cells.append(reportlab.platypus.Paragraph(xml.sax.saxutils.escape(str(value)), column_style))
			data.append(cells)
		commands.append(
			(
				"ROWBACKGROUNDS",
				(0, 1),
				(-1, -1),
				[reportlab.lib.colors.HexColor(hrep.config.COLOR_WHITE), reportlab.lib.colors.HexColor(style.zebra_fill)],
			)
		)
	else:
		placeholder_style = build_cell_style("empty", FONT_ITALIC, style.font_size, style.text_color, "CENTER")
		placeholder_row = [reportlab.platypus.Paragraph(xml.sax.saxutils.escape(placeholder), placeholder_style)]
		placeholder_row.extend("" for _ in columns[1:])
		data.append(placeholder_row)
		commands.append(("SPAN", (0, 1), (-1, 1)))

	col_widths = [mm_to_points(value) for value in resolve_column_widths(columns, width)]
	table = reportlab.platypus.Table(data, colWidths=col_widths, repeatRows=1)
	table.setStyle(reportlab.platypus.TableStyle(commands))
	return table


#============================================
def draw_table(
	surface: hrep.surface.DrawingSurface,
	columns: list[ColumnSpec],
	rows: list[list[str]],
	start_y: float,
	on_new_page: NewPageHook,
	x: float | None = None,
	width: float | None = None,
	style: hrep.config.TableStyleConfig | None = None,
	header_fill: str | None = None,
	placeholder: str = PLACEHOLDER_TEXT,
) -> TableLayout:
	"""
	Lay out a table from start_y, spilling onto new pages as needed.

	Args:
		surface: Drawing surface.
		columns: Column specs.
		rows: Body rows.
		start_y: Top of the table on the current page, in millimetres.
		on_new_page: Hook called after each page added by the table. It
			draws the page chrome and returns the y where content resumes.
		x: Left edge, defaults to the page margin.
		width: Table width, defaults to the page width minus both margins.
		style: Table style.
		header_fill: Override for the header background color.
		placeholder: Text used when rows is empty.

	Returns:
		TableLayout with the y below the last part.
	"""
	layout = surface.layout
	if x is None:
		x = layout.margin
	if width is None:
		width = layout.width - 2 * layout.margin
	table = build_table(columns, rows, width, style, header_fill, placeholder)
	points_per_mm = mm_to_points(1.0)
	avail_width = mm_to_points(width)

	y = start_y
	fresh_page = False
	parts = 0
	pages = [surface.current_page()]
	while True:
		avail_height = max(0.0, mm_to_points(layout.safe_bottom - y))
		_, table_height = table.wrap(avail_width, avail_height)
		if table_height <= avail_height:
			surface.flowable(table, x, y, width, table_height / points_per_mm)
			parts += 1
			return TableLayout(y + table_height / points_per_mm, parts, pages, len(rows))

		split_parts = table.split(avail_width, avail_height) if avail_height > 0 else []
		if len(split_parts) < 2:
			if fresh_page:
				# nothing fits even on an empty page, draw it and let it overflow
				surface.flowable(table, x, y, width, table_height / points_per_mm)
				parts += 1
				return TableLayout(y + table_height / points_per_mm, parts, pages, len(rows))
			surface.add_page()
			y = on_new_page(surface)
			pages.append(surface.current_page())
			fresh_page = True
			continue

		head = split_parts[0]
		_, head_height = head.wrap(avail_width, avail_height)
		surface.flowable(head, x, y, width, head_height / points_per_mm)
		parts += 1
		table = split_parts[1]
		surface.add_page()
		y = on_new_page(surface)
		pages.append(surface.current_page())
		fresh_page = True
