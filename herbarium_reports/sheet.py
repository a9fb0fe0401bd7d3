"""
Single species data sheet.

The sheet fetches its images before any layout starts, then lays out a two
column identity block, a description and a role dependent field section.
"""

# Standard Library
import asyncio
import dataclasses
import enum
import typing

# PIP3 modules
import reportlab.lib.utils

# local repo modules
import herbarium_reports as hrep
import herbarium_reports.assets
import herbarium_reports.config
import herbarium_reports.decorate
import herbarium_reports.flow
import herbarium_reports.records
import herbarium_reports.surface


PageCursor = hrep.flow.PageCursor
SpeciesSheetRecord = hrep.records.SpeciesSheetRecord

FONT_REGULAR = hrep.config.FONT_REGULAR
FONT_BOLD = hrep.config.FONT_BOLD
FONT_ITALIC = hrep.config.FONT_ITALIC
FONT_BOLD_ITALIC = hrep.config.FONT_BOLD_ITALIC
COLOR_PRIMARY = hrep.config.COLOR_PRIMARY
COLOR_TEXT = hrep.config.COLOR_TEXT
COLOR_TEXT_LIGHT = hrep.config.COLOR_TEXT_LIGHT

SHEET_SAFE_BOTTOM = 265.0
SHEET_CONTENT_TOP = 25.0
IMAGE_X = 155.0
IMAGE_SIZE = 35.0
NAME_GUTTER = 10.0


class SheetVariant(enum.Enum):
	CULTIVATION = "cultivation"
	FIELD_NOTES = "field_notes"


@dataclasses.dataclass(frozen=True)
class VariantSpec:
	description_title: str
	section_title: str
	empty_message: str
	fields: tuple[tuple[str, typing.Callable[[SpeciesSheetRecord], str | None]], ...]


#============================================
def gps_text(record: SpeciesSheetRecord) -> str | None:
	"""
	GPS line of the field notes section, None without coordinates.
	"""
	if record.latitude is None and record.longitude is None:
		return None
	latitude = "-" if record.latitude is None else record.latitude
	longitude = "-" if record.longitude is None else record.longitude
	return f"Lat: {latitude} | Long: {longitude}"


VARIANTS = {
	SheetVariant.CULTIVATION: VariantSpec(
		description_title="Botanical Description",
		section_title="Cultivation Guide",
		empty_message="No cultivation information registered.",
		fields=(
			("Light", lambda record: record.light),
			("Watering", lambda record: record.watering),
			("Temperature", lambda record: record.temperature),
			("Substrate", lambda record: record.substrate),
			("Nutrients", lambda record: record.nutrients),
		),
	),
	SheetVariant.FIELD_NOTES: VariantSpec(
		description_title="Local Occurrence Description",
		section_title="Field Details & Location",
		empty_message="No field data registered for this project.",
		fields=(
			("Field Notes", lambda record: record.location_details),
			("GPS Coordinates", gps_text),
		),
	),
}


#============================================
def select_variant(user_role: str | None) -> SheetVariant:
	"""
	Pick the sheet variant for the requesting user's role.

	Args:
		user_role: Role name.

	Returns:
		FIELD_NOTES for collection managers, CULTIVATION otherwise.
	"""
	if user_role in hrep.config.FIELD_NOTES_ROLES:
		return SheetVariant.FIELD_NOTES
	return SheetVariant.CULTIVATION


#============================================
def description_for(record: SpeciesSheetRecord, variant: SheetVariant) -> str | None:
	"""
	Description text, preferring the local occurrence text for field notes.
	"""
	if variant is SheetVariant.FIELD_NOTES and record.occurrence_description:
		return record.occurrence_description
	return record.description


#============================================
def build_sheet_layout() -> hrep.config.PageLayout:
	"""
	Page layout of the data sheet.
	"""
	return hrep.config.PageLayout(
		width=hrep.config.PAGE_WIDTH,
		height=hrep.config.PAGE_HEIGHT,
		margin=hrep.config.FLOW_MARGIN,
		safe_bottom=SHEET_SAFE_BOTTOM,
		content_top=SHEET_CONTENT_TOP,
	)


#============================================
def continue_page(surface: hrep.surface.DrawingSurface) -> float:
	"""
	Continuation pages of the sheet carry only the footer.
	"""
	return surface.layout.content_top


#============================================
def draw_identity_block(
	surface: hrep.surface.DrawingSurface,
	record: SpeciesSheetRecord,
	variant: SheetVariant,
	header_end: float,
	image: reportlab.lib.utils.ImageReader | None,
) -> float:
	"""
	Draw taxonomy text on the left and the photo (or a placeholder) on the right.

	Returns:
		The y where the body starts.
	"""
	margin = surface.layout.margin
	y = header_end + 5
	family = (record.family or "Family not informed").upper()
	surface.text(family, margin, y, FONT_BOLD, 11, COLOR_TEXT_LIGHT)
	y += 10

	name_width = IMAGE_X - margin - NAME_GUTTER
	name_lines = surface.measure_wrapped_lines(record.scientific_name, name_width, FONT_BOLD_ITALIC, 22)
	surface.text_lines(name_lines, margin, y, 9, FONT_BOLD_ITALIC, 22, COLOR_PRIMARY)
	y += len(name_lines) * 9 + 2

	if record.popular_name:
		popular_lines = surface.measure_wrapped_lines(f'"{record.popular_name}"', name_width, FONT_REGULAR, 14)
		surface.text_lines(popular_lines, margin, y, 7, FONT_REGULAR, 14, COLOR_TEXT)
		y += len(popular_lines) * 7 + 3

	if variant is SheetVariant.FIELD_NOTES and record.location:
		surface.text(f"Project: {record.location}", margin, header_end + IMAGE_SIZE + 5, FONT_REGULAR, 9, COLOR_TEXT_LIGHT)

	image_y = header_end + 5
	if image is not None:
		surface.image(image, IMAGE_X, image_y, IMAGE_SIZE, IMAGE_SIZE)
	else:
		surface.rect(
			IMAGE_X,
			image_y,
			IMAGE_SIZE,
			IMAGE_SIZE,
			stroke_color=hrep.config.COLOR_FOOTER_RULE,
			fill_color=hrep.config.COLOR_PLACEHOLDER_FILL,
			radius=3.0,
		)

	separator_y = max(y, header_end + IMAGE_SIZE + 15)
	surface.line(margin, separator_y, surface.page_width - margin, separator_y, COLOR_PRIMARY, 0.5)
	return separator_y + 12


#============================================
async def compose_species_sheet(
	record: SpeciesSheetRecord,
	ctx: hrep.config.ReportContext,
	logo_asset: hrep.assets.LogoAsset | None = None,
	variant: SheetVariant | None = None,
) -> tuple[hrep.surface.DrawingSurface, hrep.config.ReportResult]:
	"""
	Compose the data sheet of one species.

	Image fetches complete (or fail) before layout starts. A failed photo
	fetch leaves a placeholder box.

	Args:
		record: Species record.
		ctx: Report context, its role selects the variant.
		logo_asset: Logo asset, None draws no logo.
		variant: Override for the role based variant.

	Returns:
		Tuple of (drawing surface, ReportResult).
	"""
	if variant is None:
		variant = select_variant(ctx.generated_by_role)
	spec = VARIANTS[variant]

	if logo_asset is None:
		logo, image = None, await hrep.assets.fetch_image(record.image_url)
	else:
		logo, image = await asyncio.gather(
			logo_asset.ensure_loaded(),
			hrep.assets.fetch_image(record.image_url),
		)

	surface = hrep.surface.DrawingSurface(build_sheet_layout())
	margin = surface.layout.margin
	content_width = surface.page_width - 2 * margin
	header_end = hrep.decorate.draw_corporate_header(surface, ctx, title="Species Data Sheet", logo=logo)
	cursor = PageCursor(y=draw_identity_block(surface, record, variant, header_end, image), page_index=1)

	cursor = hrep.flow.check_page_break(surface, cursor, 20, continue_page)
	surface.text(spec.description_title, margin, cursor.y, FONT_BOLD, 12, COLOR_PRIMARY)
	cursor = PageCursor(y=cursor.y + 8, page_index=cursor.page_index)
	description = description_for(record, variant)
	lines = surface.measure_wrapped_lines(description or "", content_width, FONT_REGULAR, 10)
	if lines:
		cursor = hrep.flow.print_lines(surface, cursor, lines, margin, on_new_page=continue_page)
		cursor = PageCursor(y=cursor.y + 8, page_index=cursor.page_index)
	else:
		surface.text("No description available.", margin, cursor.y, FONT_ITALIC, 10, COLOR_TEXT_LIGHT)
		cursor = PageCursor(y=cursor.y + 10, page_index=cursor.page_index)

	cursor = hrep.flow.check_page_break(surface, cursor, 25, continue_page)
	surface.text(spec.section_title, margin, cursor.y, FONT_BOLD, 12, COLOR_PRIMARY)
	cursor = PageCursor(y=cursor.y + 8, page_index=cursor.page_index)
	printed = 0
	for label, getter in spec.fields:
		value = getter(record)
		if not value:
			continue
		cursor = hrep.flow.print_block(surface, cursor, f"{label}:", value, on_new_page=continue_page)
		printed += 1
	if printed == 0:
		surface.text(spec.empty_message, margin, cursor.y, FONT_ITALIC, 10, COLOR_TEXT_LIGHT)

	hrep.decorate.stamp_footers(surface, hrep.config.CONFIDENTIAL_NOTICE, first_page=1, rule_offset=18.0, text_offset=12.0)
	result = hrep.config.ReportResult(
		kind="sheet",
		pages=surface.page_count(),
		record_count=1,
		table_rows=[],
		charts=[],
		notice_drawn=printed == 0,
	)
	return (surface, result)
