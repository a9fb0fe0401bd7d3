import dataclasses
import datetime
import io

import pypdf
import pytest

import herbarium_reports.compose
import herbarium_reports.config
import herbarium_reports.records


compose = herbarium_reports.compose
records = herbarium_reports.records


#============================================
def _species(count: int) -> list:
	"""
	Species records spread over a handful of families.
	"""
	families = ["Myrtaceae", "Fabaceae", "Araceae", "Bromeliaceae", "Orchidaceae"]
	result = []
	for index in range(count):
		result.append(records.parse_species({
			"scientific_name": f"Genus{index % 7} epithet{index:03d}",
			"popular_name": None if index % 4 == 0 else f"Common {index}",
			"family": {"name": families[index % len(families)]},
			"location": "Horto" if index % 2 else None,
		}))
	return result


#============================================
def _pdf_pages(surface) -> list[str]:
	"""
	Text of each rendered PDF page.
	"""
	reader = pypdf.PdfReader(io.BytesIO(surface.to_bytes()))
	return [page.extract_text() for page in reader.pages]


#============================================
def test_empty_species_report(report_context: herbarium_reports.config.ReportContext) -> None:
	"""
	No records still produce a cover, a notice and an empty table.
	"""
	surface, result = compose.compose_species_report([], report_context)
	assert result.pages == 2
	assert surface.page_count() == 2
	assert surface.texts(1).count("0") == 4
	assert result.notice_drawn
	assert result.charts == []
	assert result.table_rows == []
	assert compose.NO_DATA_MESSAGE in surface.texts(2)
	pages = _pdf_pages(surface)
	assert len(pages) == 2
	assert "No records found." in pages[1]
	assert "Page 2 of 2" in pages[1]
	assert "Page 1 of 2" not in pages[0]


#============================================
def test_families_chart_folds_long_tail(report_context: herbarium_reports.config.ReportContext) -> None:
	"""
	Twenty five families chart as fourteen bars plus Others.
	"""
	counts = [50, 40] + list(range(23, 0, -1))
	families = [
		records.FamilySummary(name=f"Family{index:02d}", authorship=None, species_count=count, created_at=None)
		for index, count in enumerate(counts)
	]
	surface, result = compose.compose_families_report(families, report_context)
	assert result.charts == ["Species Richness by Family (Top 15)"]
	assert not result.notice_drawn
	bars = [
		op for op in surface.ops(2)
		if op.kind == "rect" and op.fill_color == herbarium_reports.config.COLOR_PRIMARY and op.radius == 1.0
	]
	assert len(bars) == 15
	texts = surface.texts(2)
	assert "Others" in texts
	assert "66" in texts
	assert [row[0] for row in result.table_rows[:3]] == ["Family00", "Family01", "Family02"]
	assert surface.texts(1)[:2] == [herbarium_reports.config.PRODUCT_NAME, report_context.title]


#============================================
def test_families_without_species_show_notice(report_context: herbarium_reports.config.ReportContext) -> None:
	"""
	Families with zero species give a notice instead of a chart.
	"""
	families = [records.FamilySummary("Araceae", "Juss.", 0, "2024-01-02")]
	surface, result = compose.compose_families_report(families, report_context)
	assert result.notice_drawn
	assert result.table_rows == [["Araceae", "Juss.", "0", "02/01/2024"]]


#============================================
def test_species_rows_sorted_by_family_then_name(report_context: herbarium_reports.config.ReportContext) -> None:
	"""
	Rows group by family and sort names without regard to accents or case.
	"""
	species = [
		records.SpeciesRecord("Zeyheria tuberculosa", None, "Bignoniaceae", None),
		records.SpeciesRecord("eugenia uniflora", "Pitanga", "Myrtaceae", "Horto"),
		records.SpeciesRecord("Acca sellowiana", "Feijoa", "Myrtaceae", None),
		records.SpeciesRecord("Ánemopaegma arvense", None, "Bignoniaceae", None),
	]
	surface, result = compose.compose_species_report(species, report_context)
	assert [row[0] for row in result.table_rows] == [
		"Ánemopaegma arvense",
		"Zeyheria tuberculosa",
		"Acca sellowiana",
		"eugenia uniflora",
	]
	assert result.table_rows[0][3] == herbarium_reports.config.DEFAULT_DATA_SOURCE
	assert result.table_rows[3][3] == "Horto"
	assert result.charts == ["Distribution by Family", "Top Genera", "Top Specific Epithets"]


#============================================
def test_project_species_report_has_no_location(report_context: herbarium_reports.config.ReportContext) -> None:
	"""
	Project reports drop the location column and show the project name.
	"""
	surface, result = compose.compose_species_report(_species(6), report_context, is_global=False, project_name="Cerrado")
	assert all(len(row) == 3 for row in result.table_rows)
	assert "Project: Cerrado" in surface.texts(1)
	assert "Distinct Genera" in surface.texts(1)


#============================================
def test_running_header_on_every_content_page(report_context: herbarium_reports.config.ReportContext) -> None:
	"""
	Long tables repeat the running header and footer on each page.
	"""
	surface, result = compose.compose_species_report(_species(200), report_context)
	assert result.pages >= 4
	for page in range(2, result.pages + 1):
		headers = [op for op in surface.ops(page) if op.text == report_context.title and op.y == 15.0]
		assert len(headers) == 1
		assert f"Page {page} of {result.pages}" in surface.texts(page)
	pages = _pdf_pages(surface)
	assert len(pages) == result.pages


#============================================
def test_output_is_deterministic(report_context: herbarium_reports.config.ReportContext) -> None:
	"""
	Same input gives the same drawing, other timestamps only change stamps.
	"""
	species = _species(40)
	first, first_result = compose.compose_species_report(species, report_context)
	second, second_result = compose.compose_species_report(species, report_context)
	assert first.texts() == second.texts()
	later = dataclasses.replace(report_context, generation_timestamp=datetime.datetime(2025, 1, 2, 3, 4))
	third, third_result = compose.compose_species_report(species, later)
	assert third_result.table_rows == first_result.table_rows
	assert third_result.pages == first_result.pages
	assert "Generated on: 02/01/2025 03:04" in third.texts(1)


#============================================
def test_specimens_natural_accession_order(report_context: herbarium_reports.config.ReportContext) -> None:
	"""
	Accessions sort numerically and coordinates map to the GPS column.
	"""
	specimens = [
		records.parse_specimen({"accession": "HB-100", "collector": "Lima"}),
		records.parse_specimen({"accession": "HB-9", "latitude": -15.7, "longitude": -47.9}),
		records.parse_specimen({"accession": "HB-10", "scientific_name": {"name": "Ficus sp."}}),
	]
	surface, result = compose.compose_specimens_report(specimens, report_context, project_name="Mata")
	assert [row[0] for row in result.table_rows] == ["HB-9", "HB-10", "HB-100"]
	assert [row[5] for row in result.table_rows] == ["GPS OK", "No GPS", "No GPS"]
	assert result.table_rows[0][1] == herbarium_reports.config.UNDETERMINED_LABEL
	assert "Top Collectors" in result.charts
	assert herbarium_reports.config.NO_COLLECTOR_LABEL in surface.texts(2)


#============================================
def _cover_value(surface, label: str) -> str:
	"""
	Value drawn above a cover statistic label.
	"""
	label_op = [op for op in surface.ops(1) if op.kind == "text" and op.text == label][0]
	values = [op for op in surface.ops(1) if op.kind == "text" and op.x == label_op.x and abs(op.y - (label_op.y - 6)) < 1e-6]
	return values[0].text


#============================================
def test_total_families_counts_missing_family(report_context: herbarium_reports.config.ReportContext) -> None:
	"""
	Species without a family count as one more family on the cover.
	"""
	species = [
		records.parse_species({"scientific_name": "Ficus sp."}),
		records.parse_species({"scientific_name": "Anthurium affine", "family": {"name": "Araceae"}}),
	]
	surface, _ = compose.compose_species_report(species, report_context)
	assert _cover_value(surface, "Total Families") == "2"


#============================================
def test_specimens_subtitle_and_unique_counts(report_context: herbarium_reports.config.ReportContext) -> None:
	"""
	The cover shows the project code and counts missing values as one.
	"""
	specimens = [
		records.parse_specimen({"accession": "HB-1"}),
		records.parse_specimen({"accession": "HB-2", "collector": "Lima", "scientific_name": {"name": "Ficus sp."}}),
		records.parse_specimen({"accession": "HB-3"}),
	]
	surface, _ = compose.compose_specimens_report(specimens, report_context, project_name="Mata", project_code="PRJ-01")
	assert "Mata (PRJ-01)" in surface.texts(1)
	assert _cover_value(surface, "Unique Collectors") == "2"
	assert _cover_value(surface, "Unique Species") == "2"
	surface, _ = compose.compose_specimens_report(specimens, report_context, project_name="Mata")
	assert "Mata" in surface.texts(1)


#============================================
def test_table_report_uses_internal_notice(report_context: herbarium_reports.config.ReportContext) -> None:
	"""
	Generic tables skip charts and carry the internal footer.
	"""
	surface, result = compose.compose_table_report(["Code", "Name"], [["1", "Alpha"], [2, None]], report_context)
	assert result.table_rows == [["1", "Alpha"], ["2", ""]]
	assert not result.notice_drawn
	assert result.charts == []
	assert herbarium_reports.config.INTERNAL_NOTICE in surface.texts(2)
	with pytest.raises(ValueError):
		compose.compose_table_report([], [], report_context)


#============================================
def test_family_detail_without_species(report_context: herbarium_reports.config.ReportContext) -> None:
	"""
	A family with no species fits one page with a notice.
	"""
	family = records.parse_family_detail({
		"name": "Cactaceae",
		"authorship": "Juss.",
		"reference_link": "https://example.org/a\nhttps://example.org/b\nhttps://example.org/c",
	})
	surface, result = compose.compose_family_detail_report(family, [], [], report_context)
	assert result.pages == 1
	assert result.notice_drawn
	texts = surface.texts(1)
	assert "CACTACEAE" in texts
	assert "No species registered for this family." in texts
	assert "(+2 others)" in texts
	assert "Page 1 of 1" in texts


#============================================
def test_family_detail_with_history(report_context: herbarium_reports.config.ReportContext) -> None:
	"""
	Legacy names and linked species become two tables.
	"""
	family = records.parse_family_detail({"name": "Fabaceae"})
	legacy = [records.parse_legacy_name({"name": "Leguminosae", "kind": "Synonym"})]
	species = [
		records.SpeciesRecord("Mimosa pudica", "Dormideira", "Fabaceae", None),
		records.SpeciesRecord("Inga edulis", None, "Fabaceae", None),
	]
	surface, result = compose.compose_family_detail_report(family, species, legacy, report_context)
	assert not result.notice_drawn
	assert result.record_count == 2
	assert result.table_rows == [
		["Inga edulis", "-", "Inga", "edulis"],
		["Mimosa pudica", "Dormideira", "Mimosa", "pudica"],
	]
	texts = surface.texts(1)
	assert "Name History (1)" in texts
	assert "Linked Species (2)" in texts
	assert "Unknown authorship" in texts
