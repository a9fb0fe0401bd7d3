"""
Input records and text helpers shared by the report composers.

Records arrive as plain dicts (decoded JSON). Nested relations such as a
species' family may be a string, a dict with a "name" key, or a list of
such dicts; only the first entry is used.
"""

# Standard Library
import dataclasses
import datetime
import re
import typing
import unicodedata

# local repo modules
import herbarium_reports as hrep
import herbarium_reports.config


ELLIPSIS = hrep.config.ELLIPSIS


class NothingToExportError(ValueError):
	"""
	Raised before composition when a report has no records at all.
	"""


@dataclasses.dataclass
class SpeciesRecord:
	scientific_name: str
	popular_name: str | None
	family: str | None
	location: str | None


@dataclasses.dataclass
class FamilySummary:
	name: str
	authorship: str | None
	species_count: int
	created_at: str | None


@dataclasses.dataclass
class LegacyName:
	name: str
	kind: str | None
	source: str | None


@dataclasses.dataclass
class FamilyDetail:
	name: str
	authorship: str | None
	reference_source: str | None
	reference_link: str | None
	created_at: str | None
	created_by_name: str | None


@dataclasses.dataclass
class SpecimenRecord:
	accession: str
	scientific_name: str | None
	family: str | None
	collector: str | None
	collection_date: str | None
	latitude: float | None
	longitude: float | None

	@property
	def has_coordinates(self) -> bool:
		return self.latitude is not None and self.longitude is not None


@dataclasses.dataclass
class SpeciesSheetRecord:
	scientific_name: str
	popular_name: str | None
	family: str | None
	location: str | None
	description: str | None
	light: str | None
	watering: str | None
	temperature: str | None
	substrate: str | None
	nutrients: str | None
	image_url: str | None
	occurrence_description: str | None
	location_details: str | None
	latitude: float | None
	longitude: float | None


#============================================
def extract_first(value: typing.Any) -> typing.Any:
	"""
	Return the first element of a list, or the value itself.

	Args:
		value: Scalar, dict, list or None.

	Returns:
		First entry, the value, or None for empty inputs.
	"""
	if isinstance(value, (list, tuple)):
		if not value:
			return None
		return value[0] or None
	return value or None


#============================================
def clean_text(value: typing.Any) -> str | None:
	"""
	Strip a value to text, mapping blanks to None.
	"""
	if value is None:
		return None
	text = str(value).strip()
	if not text:
		return None
	return text


#============================================
def nested_name(value: typing.Any, key: str = "name") -> str | None:
	"""
	Resolve a possibly nested relation to its display name.

	Args:
		value: String, dict, list of dicts, or None.
		key: Name key inside dicts.

	Returns:
		Display name or None.
	"""
	value = extract_first(value)
	if isinstance(value, dict):
		return clean_text(value.get(key))
	return clean_text(value)


#============================================
def parse_float(value: typing.Any) -> float | None:
	"""
	Parse an optional coordinate value.
	"""
	if value is None or value == "":
		return None
	try:
		return float(value)
	except (TypeError, ValueError) as exc:
		raise ValueError(f"Invalid coordinate value: {value!r}") from exc


#============================================
def require_mapping(data: typing.Any, kind: str) -> dict:
	"""
	Check that a record is a dict.
	"""
	if not isinstance(data, dict):
		raise ValueError(f"Expected a {kind} record object, got {type(data).__name__}")
	return data


#============================================
def parse_species(data: dict) -> SpeciesRecord:
	"""
	Parse one species list entry.

	Args:
		data: Dict with scientific_name, popular_name, family, location.

	Returns:
		SpeciesRecord.
	"""
	data = require_mapping(data, "species")
	return SpeciesRecord(
		scientific_name=clean_text(data.get("scientific_name")) or "",
		popular_name=clean_text(data.get("popular_name")),
		family=nested_name(data.get("family")),
		location=nested_name(data.get("location", data.get("locations"))),
	)


#============================================
def parse_family_summary(data: dict) -> FamilySummary:
	"""
	Parse one family list entry.
	"""
	data = require_mapping(data, "family")
	count = data.get("species_count", data.get("count", 0)) or 0
	return FamilySummary(
		name=clean_text(data.get("name")) or "",
		authorship=clean_text(data.get("authorship")),
		species_count=max(0, int(count)),
		created_at=clean_text(data.get("created_at")),
	)


#============================================
def parse_family_detail(data: dict) -> FamilyDetail:
	"""
	Parse the family header record of a family detail report.
	"""
	data = require_mapping(data, "family")
	return FamilyDetail(
		name=clean_text(data.get("name")) or "",
		authorship=clean_text(data.get("authorship")),
		reference_source=clean_text(data.get("reference_source")),
		reference_link=clean_text(data.get("reference_link")),
		created_at=clean_text(data.get("created_at")),
		created_by_name=clean_text(data.get("created_by_name")),
	)


#============================================
def parse_legacy_name(data: dict) -> LegacyName:
	"""
	Parse one legacy (historical) family name entry.
	"""
	data = require_mapping(data, "legacy name")
	return LegacyName(
		name=clean_text(data.get("name")) or "",
		kind=clean_text(data.get("kind")),
		source=clean_text(data.get("source")),
	)


#============================================
def parse_specimen(data: dict) -> SpecimenRecord:
	"""
	Parse one specimen occurrence.

	Args:
		data: Dict with accession, scientific_name, family, collector,
			collection_date, latitude, longitude.

	Returns:
		SpecimenRecord.
	"""
	data = require_mapping(data, "specimen")
	return SpecimenRecord(
		accession=clean_text(data.get("accession")) or "",
		scientific_name=nested_name(data.get("scientific_name")),
		family=nested_name(data.get("family")),
		collector=nested_name(data.get("collector")),
		collection_date=clean_text(data.get("collection_date")),
		latitude=parse_float(data.get("latitude")),
		longitude=parse_float(data.get("longitude")),
	)


#============================================
def parse_species_sheet(data: dict) -> SpeciesSheetRecord:
	"""
	Parse the record behind a single species data sheet.
	"""
	data = require_mapping(data, "species")
	image_url = None
	images = data.get("images")
	first_image = extract_first(images)
	if isinstance(first_image, dict):
		image_url = clean_text(first_image.get("url"))
	elif first_image is not None:
		image_url = clean_text(first_image)
	if image_url is None:
		image_url = clean_text(data.get("image_url"))
	return SpeciesSheetRecord(
		scientific_name=clean_text(data.get("scientific_name")) or "",
		popular_name=clean_text(data.get("popular_name")),
		family=nested_name(data.get("family")),
		location=nested_name(data.get("location", data.get("locations"))),
		description=clean_text(data.get("description")),
		light=clean_text(data.get("light")),
		watering=clean_text(data.get("watering")),
		temperature=clean_text(data.get("temperature")),
		substrate=clean_text(data.get("substrate")),
		nutrients=clean_text(data.get("nutrients")),
		image_url=image_url,
		occurrence_description=clean_text(data.get("occurrence_description")),
		location_details=clean_text(data.get("location_details")),
		latitude=parse_float(data.get("latitude")),
		longitude=parse_float(data.get("longitude")),
	)


#============================================
def require_records(records: typing.Sequence[typing.Any], what: str) -> typing.Sequence[typing.Any]:
	"""
	Raise NothingToExportError for an empty export.

	Args:
		records: Records about to be exported.
		what: Human readable name of the records.

	Returns:
		The records unchanged.
	"""
	if not records:
		raise NothingToExportError(f"No {what} found to export")
	return records


#============================================
def truncate(value: str | None, budget: int, default: str = "-") -> str:
	"""
	Cut a table cell value to a character budget.

	Args:
		value: Cell text.
		budget: Characters kept before the ellipsis.
		default: Text for missing values.

	Returns:
		Cell text.
	"""
	if not value:
		return default
	if len(value) > budget:
		return value[:budget] + ELLIPSIS
	return value


#============================================
def collation_key(value: str | None) -> str:
	"""
	Accent and case insensitive sort key.
	"""
	normalized = unicodedata.normalize("NFKD", value or "")
	stripped = "".join(char for char in normalized if not unicodedata.combining(char))
	return stripped.casefold()


#============================================
def natural_sort_key(value: str | None) -> list[tuple[int, int | str]]:
	"""
	Sort key that orders embedded numbers numerically, so "HB-9" < "HB-10".
	"""
	key = []
	for part in re.split(r"(\d+)", value or ""):
		if not part:
			continue
		if part.isdigit():
			key.append((0, int(part)))
		else:
			key.append((1, collation_key(part)))
	return key


#============================================
def slugify(name: str) -> str:
	"""
	File name safe form of a report or project name.
	"""
	return re.sub(r"[^a-zA-Z0-9]", "_", name).lower()


#============================================
def build_report_filename(name: str, date: datetime.date | None = None) -> str:
	"""
	Build "<slug>_YYYY-MM-DD.pdf" for a report.

	Args:
		name: Project or report name.
		date: Date stamp, defaults to today.

	Returns:
		File name.
	"""
	if date is None:
		date = datetime.date.today()
	return f"{slugify(name)}_{date.isoformat()}.pdf"


#============================================
def format_date(value: str | None, default: str = "-") -> str:
	"""
	Format an ISO date or timestamp as DD/MM/YYYY.

	Values that are not ISO dates are returned unchanged.

	Args:
		value: Date text.
		default: Text for missing values.

	Returns:
		Display date.
	"""
	if not value:
		return default
	try:
		parsed = datetime.date.fromisoformat(value[:10])
	except ValueError:
		return value
	return parsed.strftime(hrep.config.DATE_FORMAT)
