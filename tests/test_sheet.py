import asyncio
import datetime
import io
import pathlib

import PIL.Image
import pypdf

import herbarium_reports.assets
import herbarium_reports.config
import herbarium_reports.records
import herbarium_reports.sheet


sheet = herbarium_reports.sheet
CONTEXT_TIME = datetime.datetime(2024, 5, 1, 9, 30)


#============================================
def _context(role: str | None = None) -> herbarium_reports.config.ReportContext:
	"""
	Report context for a given role.
	"""
	return herbarium_reports.config.build_context("Species Data Sheet", "Ana Souza", role, CONTEXT_TIME)


#============================================
def _write_png(path: pathlib.Path) -> pathlib.Path:
	"""
	Write a tiny PNG image.
	"""
	PIL.Image.new("RGB", (8, 8), (16, 185, 129)).save(path)
	return path


#============================================
def _record(**extra) -> herbarium_reports.records.SpeciesSheetRecord:
	"""
	Sheet record with optional extra fields.
	"""
	data = {
		"scientific_name": "Handroanthus albus",
		"popular_name": "Ipe amarelo",
		"family": {"name": "Bignoniaceae"},
	}
	data.update(extra)
	return herbarium_reports.records.parse_species_sheet(data)


#============================================
def test_missing_image_draws_placeholder(tmp_path: pathlib.Path) -> None:
	"""
	A photo that fails to load leaves a placeholder box.
	"""
	record = _record(image_url=str(tmp_path / "missing.png"), light="Full sun")
	surface, result = asyncio.run(sheet.compose_species_sheet(record, _context()))
	boxes = [op for op in surface.ops(1) if op.kind == "rect" and op.x == sheet.IMAGE_X]
	assert len(boxes) == 1
	assert boxes[0].fill_color == herbarium_reports.config.COLOR_PLACEHOLDER_FILL
	assert not [op for op in surface.ops(1) if op.kind == "image"]
	assert result.kind == "sheet"
	assert not result.notice_drawn


#============================================
def test_loaded_image_is_drawn(tmp_path: pathlib.Path) -> None:
	"""
	A readable photo is drawn in the image slot and rendered.
	"""
	record = _record(image_url=str(_write_png(tmp_path / "photo.png")))
	surface, _ = asyncio.run(sheet.compose_species_sheet(record, _context()))
	images = [op for op in surface.ops(1) if op.kind == "image"]
	assert len(images) == 1
	assert images[0].x == sheet.IMAGE_X
	reader = pypdf.PdfReader(io.BytesIO(surface.to_bytes()))
	assert len(reader.pages) == 1


#============================================
def test_field_notes_variant_for_collection_manager() -> None:
	"""
	Collection managers get the field notes sections with GPS text.
	"""
	record = _record(
		location={"name": "Cerrado Vivo"},
		occurrence_description="Found near the creek.",
		location_details="Gallery forest edge",
		latitude=-15.5,
		longitude=-47.25,
	)
	surface, result = asyncio.run(sheet.compose_species_sheet(record, _context("Collection Manager")))
	texts = surface.texts()
	assert "Local Occurrence Description" in texts
	assert "Found near the creek." in texts
	assert "Lat: -15.5 | Long: -47.25" in texts
	assert "Project: Cerrado Vivo" in texts
	assert "Field Notes:" in texts
	assert not result.notice_drawn


#============================================
def test_cultivation_without_fields_shows_message() -> None:
	"""
	A record without cultivation data prints the empty section message.
	"""
	surface, result = asyncio.run(sheet.compose_species_sheet(_record(), _context("Curator")))
	texts = surface.texts()
	assert "Cultivation Guide" in texts
	assert "No description available." in texts
	assert "No cultivation information registered." in texts
	assert result.notice_drawn
	assert "Page 1 of 1" in texts


#============================================
def test_long_description_flows_over_pages() -> None:
	"""
	Long text continues on new pages, each with a footer.
	"""
	record = _record(description="Arvore de grande porte com casca suberosa. " * 300, watering="Weekly")
	surface, result = asyncio.run(sheet.compose_species_sheet(record, _context()))
	assert result.pages > 1
	for page in range(1, result.pages + 1):
		assert f"Page {page} of {result.pages}" in surface.texts(page)
		body = [op for op in surface.ops(page) if op.kind == "text" and op.tag == ""]
		assert all(op.y <= sheet.SHEET_SAFE_BOTTOM for op in body)
	assert "Watering:" in surface.texts(result.pages)


#============================================
def test_logo_asset_loads_once(tmp_path: pathlib.Path, monkeypatch) -> None:
	"""
	The logo singleton is fetched once however many sheets use it.
	"""
	logo_path = _write_png(tmp_path / "logo.png")
	calls = []
	real_load = herbarium_reports.assets.load_image

	def counting_load(source):
		calls.append(source)
		return real_load(source)

	monkeypatch.setattr(herbarium_reports.assets, "load_image", counting_load)
	asset = herbarium_reports.assets.get_logo_asset(logo_path)
	assert herbarium_reports.assets.get_logo_asset("other.png") is asset

	async def compose_two():
		return await asyncio.gather(
			sheet.compose_species_sheet(_record(), _context(), asset),
			sheet.compose_species_sheet(_record(), _context(), asset),
		)

	results = asyncio.run(compose_two())
	assert calls == [logo_path]
	assert asset.loaded
	assert asset.image is not None
	for surface, _ in results:
		assert [op for op in surface.ops(1) if op.kind == "image"]
	assert herbarium_reports.assets.load_logo(asset) is asset.image
	assert calls == [logo_path]


#============================================
def test_variant_selection() -> None:
	"""
	Only collection manager roles switch to field notes.
	"""
	assert sheet.select_variant("Gestor de Acervo") is sheet.SheetVariant.FIELD_NOTES
	assert sheet.select_variant("Curator") is sheet.SheetVariant.CULTIVATION
	assert sheet.select_variant(None) is sheet.SheetVariant.CULTIVATION
