import io

import pypdf
import pytest

import herbarium_reports.surface


surface_mod = herbarium_reports.surface


#============================================
def test_parse_hex_color() -> None:
	"""
	Hex colors map to 0-1 floats, bad values to black.
	"""
	assert surface_mod.parse_hex_color("#FFFFFF") == (1.0, 1.0, 1.0)
	assert surface_mod.parse_hex_color("#064E3B")[1] == pytest.approx(78 / 255.0)
	assert surface_mod.parse_hex_color("") == (0.0, 0.0, 0.0)


#============================================
def test_string_width_and_wrapping() -> None:
	"""
	Wrapped lines each fit the requested width.
	"""
	text = "Handroanthus impetiginosus " * 10
	lines = surface_mod.measure_wrapped_lines(text, 60.0, "Helvetica", 10)
	assert len(lines) > 1
	assert all(surface_mod.string_width(line, "Helvetica", 10) <= 60.0 + 1e-6 for line in lines)
	assert surface_mod.measure_wrapped_lines("   ", 60.0, "Helvetica", 10) == []


#============================================
def test_set_current_page_range() -> None:
	"""
	Only existing pages can be selected.
	"""
	surface = surface_mod.DrawingSurface()
	surface.add_page()
	surface.set_current_page(1)
	surface.text("back on one", 20.0, 20.0)
	assert surface.texts(1) == ["back on one"]
	assert surface.texts(2) == []
	with pytest.raises(ValueError):
		surface.set_current_page(3)
	with pytest.raises(ValueError):
		surface.set_current_page(0)


#============================================
def test_discard_tagged_only_removes_tagged_ops() -> None:
	"""
	Tagged operations can be removed without touching the rest.
	"""
	surface = surface_mod.DrawingSurface()
	surface.text("body", 20.0, 40.0)
	with surface.tagged("footer"):
		surface.text("footer", 20.0, 290.0)
	surface.line(10.0, 50.0, 200.0, 50.0)
	assert surface.discard_tagged("footer") == 1
	assert [op.kind for op in surface.ops(1)] == ["text", "line"]


#============================================
def test_replay_to_pdf() -> None:
	"""
	Every operation kind replays onto a canvas.
	"""
	surface = surface_mod.DrawingSurface()
	surface.text("Left", 20.0, 20.0)
	surface.text("Center", 105.0, 30.0, align="center")
	surface.text("Right", 190.0, 40.0, align="RIGHT")
	surface.rect(20.0, 50.0, 50.0, 10.0, fill_color="#10B981", radius=1.0)
	surface.rect(20.0, 70.0, 50.0, 10.0, stroke_color="")
	surface.line(20.0, 90.0, 190.0, 90.0)
	surface.add_page()
	surface.text("Second page", 20.0, 20.0)
	reader = pypdf.PdfReader(io.BytesIO(surface.to_bytes()))
	assert len(reader.pages) == 2
	first = reader.pages[0].extract_text()
	assert "Left" in first
	assert "Center" in first
	assert "Right" in first
	assert "Second page" in reader.pages[1].extract_text()
