"""
Report composers for the tabular report kinds.

Every tabular report follows the same plan: a cover page with statistics, a
content page with charts (or a notice when there is nothing to chart), a
paginated table, then footers stamped on every page after the cover.
"""

# Standard Library
import dataclasses

# PIP3 modules
import reportlab.lib.utils

# local repo modules
import herbarium_reports as hrep
import herbarium_reports.aggregate
import herbarium_reports.autotable
import herbarium_reports.chart
import herbarium_reports.config
import herbarium_reports.decorate
import herbarium_reports.flow
import herbarium_reports.records
import herbarium_reports.surface


ColumnSpec = hrep.autotable.ColumnSpec
SeriesEntry = hrep.aggregate.SeriesEntry
PageCursor = hrep.flow.PageCursor
ReportContext = hrep.config.ReportContext
ReportResult = hrep.config.ReportResult
DrawingSurface = hrep.surface.DrawingSurface

FONT_BOLD = hrep.config.FONT_BOLD
FONT_ITALIC = hrep.config.FONT_ITALIC
FONT_REGULAR = hrep.config.FONT_REGULAR
COLOR_PRIMARY = hrep.config.COLOR_PRIMARY
COLOR_TEXT = hrep.config.COLOR_TEXT
COLOR_TEXT_LIGHT = hrep.config.COLOR_TEXT_LIGHT
CONFIDENTIAL_NOTICE = hrep.config.CONFIDENTIAL_NOTICE
INTERNAL_NOTICE = hrep.config.INTERNAL_NOTICE
NO_DATA_MESSAGE = "Not enough data to build charts yet."
DEFAULT_LOCATION = hrep.config.DEFAULT_DATA_SOURCE

truncate = hrep.records.truncate
collation_key = hrep.records.collation_key


@dataclasses.dataclass
class ChartSpec:
	title: str
	series: list[SeriesEntry]


@dataclasses.dataclass
class TableSpec:
	title: str
	columns: list[ColumnSpec]
	rows: list[list[str]]
	header_fill: str | None = None


#============================================
def running_header_hook(ctx: ReportContext):
	"""
	Build the page continuation hook redrawing the running header.

	Args:
		ctx: Report context.

	Returns:
		Callable taking the surface and returning the content top.
	"""
	def on_new_page(surface: DrawingSurface) -> float:
		header_bottom = hrep.decorate.draw_running_header(surface, ctx)
		return header_bottom + hrep.config.CONTENT_TOP_GAP
	return on_new_page


#============================================
def draw_charts(
	surface: DrawingSurface,
	cursor: PageCursor,
	charts: list[ChartSpec],
	on_new_page,
	config: hrep.config.ChartConfig | None = None,
) -> tuple[PageCursor, list[str]]:
	"""
	Draw charts in priority order with a page break check before each.

	Args:
		surface: Drawing surface.
		cursor: Current cursor.
		charts: Charts to draw, empty series are skipped.
		on_new_page: Page continuation hook.
		config: Chart geometry.

	Returns:
		Tuple of (cursor below the last chart, drawn chart titles).
	"""
	if config is None:
		config = hrep.config.build_chart_config()
	drawn = []
	for spec in charts:
		if not spec.series:
			continue
		needed = max(config.min_height, hrep.chart.chart_height(len(spec.series), config))
		cursor = hrep.flow.check_page_break(surface, cursor, needed, on_new_page)
		end_y = hrep.chart.draw_bar_chart(surface, spec.series, cursor.y, spec.title, config)
		cursor = PageCursor(y=end_y, page_index=cursor.page_index)
		drawn.append(spec.title)
	return (cursor, drawn)


#============================================
def draw_table_section(
	surface: DrawingSurface,
	cursor: PageCursor,
	table: TableSpec,
	on_new_page,
	title_font_size: float = 12,
	title_color: str = COLOR_TEXT,
) -> PageCursor:
	"""
	Draw a titled table, moving the title to a new page when it would sit
	at the very bottom of the current one.

	Returns:
		Cursor below the table.
	"""
	layout = surface.layout
	if cursor.y > layout.safe_bottom - hrep.config.TABLE_TITLE_RESERVE:
		cursor = hrep.flow.start_new_page(surface, cursor, on_new_page)
	surface.text(table.title, layout.margin, cursor.y, FONT_BOLD, title_font_size, title_color)
	start_y = cursor.y + hrep.config.TABLE_TITLE_GAP
	result = hrep.autotable.draw_table(
		surface,
		table.columns,
		table.rows,
		start_y,
		on_new_page,
		header_fill=table.header_fill,
	)
	page_index = cursor.page_index + len(result.pages) - 1
	return PageCursor(y=result.end_y, page_index=page_index)


#============================================
def compose_tabular_report(
	kind: str,
	ctx: ReportContext,
	stats: list[tuple[str, int | str]],
	charts: list[ChartSpec] | None,
	table: TableSpec,
	record_count: int,
	subtitle: str | None = None,
	notice: str = CONFIDENTIAL_NOTICE,
	logo: reportlab.lib.utils.ImageReader | None = None,
	stats_offset: float = hrep.decorate.COVER_STATS_OFFSET,
) -> tuple[DrawingSurface, ReportResult]:
	"""
	Compose a cover, charts and a paginated table into one document.

	Args:
		kind: Report kind name stored in the result.
		ctx: Report context.
		stats: Cover statistics.
		charts: Charts in priority order. None skips the chart section.
		table: Table section.
		record_count: Number of input records.
		subtitle: Cover subtitle.
		notice: Footer notice text.
		logo: Decoded logo.
		stats_offset: Gap above the cover statistics grid.

	Returns:
		Tuple of (drawing surface, ReportResult).
	"""
	surface = DrawingSurface()
	hrep.decorate.draw_cover(surface, ctx, stats, subtitle=subtitle, logo=logo, stats_offset=stats_offset)

	on_new_page = running_header_hook(ctx)
	cursor = hrep.flow.start_new_page(surface, PageCursor(y=0.0, page_index=1), on_new_page)

	drawn_charts: list[str] = []
	notice_drawn = False
	if charts is not None:
		if record_count > 0:
			cursor, drawn_charts = draw_charts(surface, cursor, charts, on_new_page)
		if not drawn_charts:
			end_y = hrep.decorate.draw_notice_box(surface, cursor.y, NO_DATA_MESSAGE)
			cursor = PageCursor(y=end_y, page_index=cursor.page_index)
			notice_drawn = True

	draw_table_section(surface, cursor, table, on_new_page)
	hrep.decorate.stamp_footers(surface, notice, first_page=2)
	result = ReportResult(
		kind=kind,
		pages=surface.page_count(),
		record_count=record_count,
		table_rows=table.rows,
		charts=drawn_charts,
		notice_drawn=notice_drawn,
	)
	return (surface, result)


#============================================
def compose_species_report(
	species: list[hrep.records.SpeciesRecord],
	ctx: ReportContext,
	is_global: bool = True,
	project_name: str | None = None,
	logo: reportlab.lib.utils.ImageReader | None = None,
) -> tuple[DrawingSurface, ReportResult]:
	"""
	Species catalogue report, either global or scoped to one project.

	Args:
		species: Species records.
		ctx: Report context.
		is_global: Global catalogue (adds a location column) or project list.
		project_name: Project shown in the subtitle of project reports.
		logo: Decoded logo.

	Returns:
		Tuple of (drawing surface, ReportResult).
	"""
	names = [record.scientific_name for record in species]
	families = [record.family or hrep.config.NO_FAMILY_LABEL for record in species]
	stats: list[tuple[str, int | str]] = [
		("Total Species", len(species)),
		("Total Families", hrep.aggregate.distinct_count(families)),
	]
	if is_global:
		locations = [record.location for record in species if record.location]
		stats.append(("Total Locations", hrep.aggregate.distinct_count(locations)))
	else:
		genera = [hrep.aggregate.genus_of(name) for name in names if hrep.aggregate.genus_of(name)]
		stats.append(("Distinct Genera", hrep.aggregate.distinct_count(genera)))
	stats.append(("Missing Popular Name", sum(1 for record in species if not record.popular_name)))

	family_series = hrep.aggregate.count_by(species, lambda record: record.family, hrep.config.NO_FAMILY_LABEL)
	genus_series = hrep.aggregate.count_by(names, hrep.aggregate.genus_of, None)
	epithet_series = hrep.aggregate.count_by(names, hrep.aggregate.epithet_of, None)
	charts = [
		ChartSpec("Distribution by Family", hrep.aggregate.top_n_plus_others(family_series, 14)),
		ChartSpec("Top Genera", hrep.aggregate.top_n_plus_others(genus_series, 10)),
		ChartSpec("Top Specific Epithets", hrep.aggregate.top_n_plus_others(epithet_series, 10)),
	]

	ordered = sorted(
		species,
		key=lambda record: (collation_key(record.family), collation_key(record.scientific_name)),
	)
	columns = [
		ColumnSpec("Scientific Name", font_name=FONT_ITALIC),
		ColumnSpec("Popular Name", width=40.0),
		ColumnSpec("Family", width=40.0),
	]
	if is_global:
		columns.append(ColumnSpec("Location", width=35.0))
	rows = []
	for record in ordered:
		row = [
			truncate(record.scientific_name, 60),
			truncate(record.popular_name, 40),
			truncate(record.family, 30),
		]
		if is_global:
			row.append(truncate(record.location or DEFAULT_LOCATION, 30))
		rows.append(row)

	if is_global:
		subtitle = "Global Catalogue"
	else:
		subtitle = f"Project: {project_name or 'Unnamed project'}"
	table = TableSpec(title="Species List", columns=columns, rows=rows)
	return compose_tabular_report("species", ctx, stats, charts, table, len(species), subtitle=subtitle, logo=logo)


#============================================
def compose_families_report(
	families: list[hrep.records.FamilySummary],
	ctx: ReportContext,
	logo: reportlab.lib.utils.ImageReader | None = None,
) -> tuple[DrawingSurface, ReportResult]:
	"""
	Family list report with species richness per family.

	Args:
		families: Family summaries with species counts.
		ctx: Report context.
		logo: Decoded logo.

	Returns:
		Tuple of (drawing surface, ReportResult).
	"""
	total_species = sum(family.species_count for family in families)
	with_species = sum(1 for family in families if family.species_count > 0)
	stats: list[tuple[str, int | str]] = [
		("Total Families", len(families)),
		("Total Species", total_species),
		("With Species", with_species),
		("Without Species", len(families) - with_species),
	]
	charts: list[ChartSpec] = []
	if total_species > 0:
		series = hrep.aggregate.rank_series(
			(family.name, family.species_count) for family in families if family.species_count > 0
		)
		charts.append(ChartSpec("Species Richness by Family (Top 15)", hrep.aggregate.top_n_plus_others(series, 14)))

	ordered = sorted(families, key=lambda family: (-family.species_count, collation_key(family.name)))
	columns = [
		ColumnSpec("Family", font_name=FONT_BOLD),
		ColumnSpec("Authorship", width=55.0, font_name=FONT_ITALIC, color=COLOR_TEXT_LIGHT),
		ColumnSpec("Species", width=22.0, align="CENTER"),
		ColumnSpec("Registered", width=30.0, align="CENTER"),
	]
	rows = [
		[
			truncate(family.name, 40),
			truncate(family.authorship, 40),
			str(family.species_count),
			hrep.records.format_date(family.created_at),
		]
		for family in ordered
	]
	table = TableSpec(title="Registered Families", columns=columns, rows=rows)
	return compose_tabular_report("families", ctx, stats, charts, table, len(families), logo=logo)


#============================================
def compose_specimens_report(
	specimens: list[hrep.records.SpecimenRecord],
	ctx: ReportContext,
	project_name: str | None = None,
	logo: reportlab.lib.utils.ImageReader | None = None,
	project_code: str | None = None,
) -> tuple[DrawingSurface, ReportResult]:
	"""
	Specimen occurrence report for one project.

	Args:
		specimens: Specimen records.
		ctx: Report context.
		project_name: Project shown in the cover subtitle.
		project_code: Project code shown beside the name.
		logo: Decoded logo.

	Returns:
		Tuple of (drawing surface, ReportResult).
	"""
	undetermined = hrep.config.UNDETERMINED_LABEL
	stats: list[tuple[str, int | str]] = [
		("Total Specimens", len(specimens)),
		("Unique Species", hrep.aggregate.distinct_count(s.scientific_name for s in specimens)),
		("Unique Collectors", hrep.aggregate.distinct_count(s.collector for s in specimens)),
		("With Coordinates", sum(1 for s in specimens if s.has_coordinates)),
	]
	species_series = hrep.aggregate.count_by(specimens, lambda s: s.scientific_name, undetermined)
	family_series = hrep.aggregate.count_by(specimens, lambda s: s.family, undetermined)
	collector_series = hrep.aggregate.count_by(specimens, lambda s: s.collector, hrep.config.NO_COLLECTOR_LABEL)
	charts = [
		ChartSpec("Top Species", hrep.aggregate.top_n_plus_others(species_series, 10)),
		ChartSpec("Distribution by Family", hrep.aggregate.top_n_plus_others(family_series, 10)),
		ChartSpec("Top Collectors", hrep.aggregate.top_n_plus_others(collector_series, 10)),
	]

	ordered = sorted(specimens, key=lambda s: hrep.records.natural_sort_key(s.accession))
	columns = [
		ColumnSpec("Accession", width=35.0, font_name=FONT_BOLD),
		ColumnSpec("Species", font_name=FONT_ITALIC),
		ColumnSpec("Family", width=35.0),
		ColumnSpec("Collector", width=35.0),
		ColumnSpec("Date", width=25.0, align="CENTER"),
		ColumnSpec("GPS", width=20.0, align="CENTER"),
	]
	rows = []
	for specimen in ordered:
		rows.append([
			specimen.accession or "-",
			truncate(specimen.scientific_name, 50, undetermined),
			truncate(specimen.family, 30, undetermined),
			truncate(specimen.collector, 30),
			hrep.records.format_date(specimen.collection_date),
			"GPS OK" if specimen.has_coordinates else "No GPS",
		])
	subtitle = project_name
	if project_name and project_code:
		subtitle = f"{project_name} ({project_code})"
	table = TableSpec(title="Specimen Occurrences", columns=columns, rows=rows)
	return compose_tabular_report(
		"specimens",
		ctx,
		stats,
		charts,
		table,
		len(specimens),
		subtitle=subtitle,
		logo=logo,
		stats_offset=35.0,
	)


#============================================
def compose_table_report(
	columns: list[str],
	rows: list[list[object]],
	ctx: ReportContext,
	subtitle: str | None = None,
	logo: reportlab.lib.utils.ImageReader | None = None,
) -> tuple[DrawingSurface, ReportResult]:
	"""
	Generic list report: cover, running header and one table.
	"""
	if not columns:
		raise ValueError("A table report needs at least one column")
	specs = [ColumnSpec(header) for header in columns]
	text_rows = [["" if value is None else str(value) for value in row] for row in rows]
	table = TableSpec(title=ctx.title, columns=specs, rows=text_rows)
	return compose_tabular_report(
		"table",
		ctx,
		[],
		None,
		table,
		len(rows),
		subtitle=subtitle,
		notice=INTERNAL_NOTICE,
		logo=logo,
	)


#============================================
def draw_family_metadata(
	surface: DrawingSurface,
	family: hrep.records.FamilyDetail,
	y: float,
) -> float:
	"""
	Draw the created-by, references and links box of a family.

	Returns:
		The y below the box.
	"""
	margin = surface.layout.margin
	width = surface.page_width - 2 * margin
	surface.rect(
		margin,
		y,
		width,
		35,
		stroke_color=hrep.config.COLOR_TABLE_RULE,
		fill_color=hrep.config.COLOR_ZEBRA,
		radius=2.0,
	)
	left = margin + 4
	value_x = left + 20
	text_y = y + 8
	surface.text("Created by:", left, text_y, FONT_BOLD, 8, COLOR_TEXT)
	surface.text(family.created_by_name or hrep.config.DEFAULT_GENERATED_BY, value_x, text_y, FONT_REGULAR, 8, COLOR_TEXT_LIGHT)
	if family.reference_source:
		snippet = family.reference_source.split("\n")[0][:80]
		if len(family.reference_source) > 80:
			snippet += hrep.config.ELLIPSIS
		surface.text("References:", left, text_y + 6, FONT_BOLD, 8, COLOR_TEXT)
		surface.text(snippet, value_x, text_y + 6, FONT_REGULAR, 8, COLOR_TEXT_LIGHT)
	if family.reference_link:
		links = [line.strip() for line in family.reference_link.split("\n") if line.strip()]
		if links:
			surface.text("Links:", left, text_y + 12, FONT_BOLD, 8, COLOR_TEXT)
			surface.text(links[0][:80], value_x, text_y + 12, FONT_REGULAR, 8, COLOR_PRIMARY)
			if len(links) > 1:
				surface.text(f"(+{len(links) - 1} others)", value_x, text_y + 16, FONT_REGULAR, 7, COLOR_TEXT_LIGHT)
	return y + 45


#============================================
def compose_family_detail_report(
	family: hrep.records.FamilyDetail,
	species: list[hrep.records.SpeciesRecord],
	legacy_names: list[hrep.records.LegacyName],
	ctx: ReportContext,
	logo: reportlab.lib.utils.ImageReader | None = None,
) -> tuple[DrawingSurface, ReportResult]:
	"""
	Detailed report of a single family.

	Shows the family identity, richness figures, reference metadata, the
	name history and the species linked to the family.

	Args:
		family: Family record.
		species: Species linked to the family.
		legacy_names: Historical names of the family.
		ctx: Report context.
		logo: Decoded logo.

	Returns:
		Tuple of (drawing surface, ReportResult).
	"""
	surface = DrawingSurface()
	on_new_page = running_header_hook(ctx)
	center_x = surface.page_width / 2
	y = hrep.decorate.draw_corporate_header(surface, ctx, title="Detailed Family Report", logo=logo) + 3

	surface.text(family.name.upper(), center_x, y, FONT_BOLD, 24, COLOR_PRIMARY, "CENTER")
	y += 8
	surface.text(family.authorship or "Unknown authorship", center_x, y, FONT_ITALIC, 11, COLOR_TEXT_LIGHT, "CENTER")
	y += 12

	genera = [hrep.aggregate.genus_of(record.scientific_name) for record in species]
	figures = [
		("SPECIES", len(species)),
		("GENERA", hrep.aggregate.distinct_count(genus for genus in genera if genus)),
	]
	for index, (label, value) in enumerate(figures):
		stat_x = center_x - 30 + index * 60
		surface.text(str(value), stat_x, y, FONT_BOLD, 16, COLOR_TEXT, "CENTER")
		surface.text(label, stat_x, y + 5, FONT_REGULAR, 8, COLOR_TEXT_LIGHT, "CENTER")
	y += 25
	y = draw_family_metadata(surface, family, y)
	cursor = PageCursor(y=y, page_index=1)

	if legacy_names:
		legacy_table = TableSpec(
			title=f"Name History ({len(legacy_names)})",
			columns=[
				ColumnSpec("Legacy Name", font_name=FONT_ITALIC),
				ColumnSpec("Type", width=40.0),
				ColumnSpec("Source", width=60.0),
			],
			rows=[[legacy.name, legacy.kind or "-", legacy.source or "-"] for legacy in legacy_names],
			header_fill=hrep.config.COLOR_LEGACY_HEADER,
		)
		cursor = draw_table_section(surface, cursor, legacy_table, on_new_page, 11, COLOR_PRIMARY)
		cursor = PageCursor(y=cursor.y + 15, page_index=cursor.page_index)

	ordered = sorted(species, key=lambda record: collation_key(record.scientific_name))
	rows = []
	for record in ordered:
		rows.append([
			record.scientific_name or "-",
			record.popular_name or "-",
			hrep.aggregate.genus_of(record.scientific_name) or "",
			hrep.aggregate.epithet_of(record.scientific_name) or "",
		])
	notice_drawn = False
	title = f"Linked Species ({len(species)})"
	if rows:
		species_table = TableSpec(
			title=title,
			columns=[
				ColumnSpec("Scientific Name", font_name=FONT_ITALIC),
				ColumnSpec("Popular Name", width=50.0),
				ColumnSpec("Genus", width=30.0),
				ColumnSpec("Epithet", width=30.0),
			],
			rows=rows,
		)
		draw_table_section(surface, cursor, species_table, on_new_page, 11, COLOR_PRIMARY)
	else:
		cursor = hrep.flow.check_page_break(surface, cursor, 40, on_new_page)
		surface.text(title, surface.layout.margin, cursor.y, FONT_BOLD, 11, COLOR_PRIMARY)
		hrep.decorate.draw_notice_box(surface, cursor.y + 6, "No species registered for this family.", height=30)
		notice_drawn = True

	hrep.decorate.stamp_footers(surface, CONFIDENTIAL_NOTICE, first_page=1)
	result = ReportResult(
		kind="family-detail",
		pages=surface.page_count(),
		record_count=len(species),
		table_rows=rows,
		charts=[],
		notice_drawn=notice_drawn,
	)
	return (surface, result)
