"""
CLI entry points for herbarium report generation.
"""

# Standard Library
import argparse
import asyncio
import datetime
import json
import pathlib
import time

# local repo modules
import herbarium_reports as hrep
import herbarium_reports.assets
import herbarium_reports.compose
import herbarium_reports.config
import herbarium_reports.labels
import herbarium_reports.records
import herbarium_reports.sheet


NothingToExportError = hrep.records.NothingToExportError

REPORT_KINDS = (
	"species",
	"families",
	"specimens",
	"table",
	"family-detail",
	"sheet",
	"labels",
)

DEFAULT_TITLES = {
	"species": "Species Report",
	"families": "Families Report",
	"specimens": "Specimens Report",
	"table": "Data Report",
	"family-detail": "Family Report",
	"sheet": "Species Data Sheet",
	"labels": "Herbarium Labels",
}


#============================================
def load_input(input_path: pathlib.Path) -> object:
	"""
	Read the JSON input document.

	Args:
		input_path: JSON file path.

	Returns:
		Decoded JSON value.
	"""
	with open(input_path, "r", encoding="utf-8") as handle:
		return json.load(handle)


#============================================
def record_list(data: object, key: str = "records") -> list:
	"""
	Extract a record list from a bare list or an object holding one.

	Args:
		data: Decoded JSON.
		key: Object key holding the list.

	Returns:
		List of record dicts.
	"""
	if isinstance(data, list):
		return data
	if isinstance(data, dict) and isinstance(data.get(key, []), list):
		return data.get(key, [])
	raise ValueError(f"Expected a list or an object with a '{key}' list")


#============================================
def build_report(
	kind: str,
	data: object,
	ctx: hrep.config.ReportContext,
	args: argparse.Namespace,
	logo_asset: hrep.assets.LogoAsset | None,
):
	"""
	Parse the input for one report kind and compose the document.

	Raises NothingToExportError before any drawing when there is nothing
	to put in the document.

	Args:
		kind: Report kind.
		data: Decoded JSON input.
		ctx: Report context.
		args: Parsed argparse namespace.
		logo_asset: Logo asset or None.

	Returns:
		Tuple of (drawing surface, ReportResult).
	"""
	if kind == "species":
		species = [hrep.records.parse_species(item) for item in record_list(data)]
		hrep.records.require_records(species, "species")
		logo = hrep.assets.load_logo(logo_asset)
		return hrep.compose.compose_species_report(
			species,
			ctx,
			is_global=args.is_global,
			project_name=args.project_name,
			logo=logo,
		)
	if kind == "families":
		families = [hrep.records.parse_family_summary(item) for item in record_list(data)]
		hrep.records.require_records(families, "families")
		logo = hrep.assets.load_logo(logo_asset)
		return hrep.compose.compose_families_report(families, ctx, logo=logo)
	if kind == "specimens":
		specimens = [hrep.records.parse_specimen(item) for item in record_list(data)]
		hrep.records.require_records(specimens, "specimens")
		logo = hrep.assets.load_logo(logo_asset)
		return hrep.compose.compose_specimens_report(
			specimens, ctx, project_name=args.project_name, logo=logo, project_code=args.project_code
		)
	if kind == "table":
		if not isinstance(data, dict):
			raise ValueError("Table input must be an object with 'columns' and 'rows'")
		columns = [str(column) for column in data.get("columns", [])]
		rows = data.get("rows", [])
		hrep.records.require_records(rows, "rows")
		logo = hrep.assets.load_logo(logo_asset)
		return hrep.compose.compose_table_report(columns, rows, ctx, subtitle=data.get("subtitle"), logo=logo)
	if kind == "family-detail":
		if not isinstance(data, dict) or "family" not in data:
			raise ValueError("Family detail input must be an object with a 'family' entry")
		family = hrep.records.parse_family_detail(data["family"])
		species = [hrep.records.parse_species(item) for item in data.get("species", [])]
		legacy_names = [hrep.records.parse_legacy_name(item) for item in data.get("legacy_names", [])]
		logo = hrep.assets.load_logo(logo_asset)
		return hrep.compose.compose_family_detail_report(family, species, legacy_names, ctx, logo=logo)
	if kind == "sheet":
		if isinstance(data, dict) and "species" in data:
			data = data["species"]
		record = hrep.records.parse_species_sheet(data)
		return asyncio.run(hrep.sheet.compose_species_sheet(record, ctx, logo_asset))
	if kind == "labels":
		cards = [hrep.labels.build_label_card(item) for item in record_list(data)]
		hrep.records.require_records(cards, "specimens for labels")
		surface, layouts = hrep.labels.compose_label_sheet(cards)
		result = hrep.config.ReportResult(
			kind="labels",
			pages=surface.page_count(),
			record_count=len(cards),
			table_rows=[],
			charts=[],
			notice_drawn=False,
		)
		truncated = sum(1 for layout in layouts if layout.truncated)
		print(f"Labels with truncated descriptions: {truncated}")
		return (surface, result)
	raise ValueError(f"Unknown report kind: {kind}")


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	args: argparse.Namespace,
	output_path: pathlib.Path,
	ctx: hrep.config.ReportContext,
	result: hrep.config.ReportResult,
) -> None:
	"""
	Write a manifest JSON file.

	Args:
		manifest_path: Output path.
		args: Parsed argparse namespace.
		output_path: Written PDF path.
		ctx: Report context.
		result: Report result.
	"""
	data = {
		"kind": result.kind,
		"input": str(args.input_path),
		"output": str(output_path),
		"title": ctx.title,
		"generated_by": ctx.generated_by,
		"generated_at": ctx.generation_timestamp.isoformat(timespec="seconds"),
		"record_count": result.record_count,
		"pages": result.pages,
		"table_rows": len(result.table_rows),
		"charts": result.charts,
		"notice_drawn": result.notice_drawn,
	}
	with open(manifest_path, "w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Argument list, defaults to sys.argv.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Build herbarium PDF reports and label sheets from JSON records.")
	parser.add_argument("kind", choices=REPORT_KINDS, help="Report kind.")
	parser.add_argument("input_path", help="JSON input file.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")

	context_group = parser.add_argument_group("Context")
	context_group.add_argument("-t", "--title", dest="title", default=None, help="Report title.")
	context_group.add_argument("-u", "--user-name", dest="user_name", default=None, help="Requesting user name.")
	context_group.add_argument("-r", "--user-role", dest="user_role", default=None, help="Requesting user role.")
	context_group.add_argument("-j", "--project-name", dest="project_name", default=None, help="Project name.")
	context_group.add_argument("-c", "--project-code", dest="project_code", default=None, help="Project code shown beside the name.")
	context_group.add_argument("-g", "--global", dest="is_global", action="store_true", help="Global species catalogue.")
	context_group.add_argument("-G", "--project", dest="is_global", action="store_false", help="Project species list.")
	context_group.add_argument("-l", "--logo", dest="logo_path", default=None, help="Logo image path or URL.")

	parser.set_defaults(is_global=True)

	args = parser.parse_args(argv)
	return args


#============================================
def run_pipeline(args: argparse.Namespace) -> hrep.config.ReportResult:
	"""
	Run the full pipeline from JSON input to PDF output.

	Args:
		args: Parsed argparse namespace.

	Returns:
		ReportResult of the written document.
	"""
	title = args.title or DEFAULT_TITLES[args.kind]
	output_path = args.output_path
	if output_path is None:
		output_path = hrep.records.build_report_filename(args.project_name or title)
	output_path = pathlib.Path(output_path)

	print("Herbarium report pipeline")
	print(f"Report kind: {args.kind}")
	print(f"Input: {args.input_path}")
	print(f"Output PDF: {output_path}")
	if args.manifest_path:
		print(f"Manifest: {args.manifest_path}")

	start_time = time.perf_counter()
	data = load_input(pathlib.Path(args.input_path))
	ctx = hrep.config.build_context(
		title,
		user_name=args.user_name,
		user_role=args.user_role,
		timestamp=datetime.datetime.now(),
	)
	logo_asset = None
	if args.logo_path:
		logo_asset = hrep.assets.get_logo_asset(args.logo_path)

	compose_start = time.perf_counter()
	surface, result = build_report(args.kind, data, ctx, args, logo_asset)
	compose_end = time.perf_counter()
	print(f"Records: {result.record_count}")

	save_start = time.perf_counter()
	surface.save(output_path)
	save_end = time.perf_counter()
	print(f"Pages written: {result.pages}")

	manifest_path = args.manifest_path
	if manifest_path is None:
		manifest_path = f"{output_path}.json"
	write_manifest(pathlib.Path(manifest_path), args, output_path, ctx, result)

	total_time = time.perf_counter() - start_time
	print(
		"Timing: compose={:.2f}s save={:.2f}s total={:.2f}s".format(
			compose_end - compose_start,
			save_end - save_start,
			total_time,
		)
	)
	print(f"Manifest written: {manifest_path}")
	return result


#============================================
def main() -> None:
	"""
	Main entry point.
	"""
	args = parse_args()
	try:
		run_pipeline(args)
	except NothingToExportError as exc:
		print(f"Nothing to export: {exc}")
		raise SystemExit(1) from exc
