"""
Recording drawing surface replayed onto a ReportLab canvas.

Layout code works in millimetres with y growing towards the bottom of the
page. Draw calls are recorded per page so earlier pages can be selected again
(the footer pass needs the final page count). Nothing touches ReportLab's
canvas until render() replays the pages in order.
"""

# Standard Library
import contextlib
import dataclasses
import io
import pathlib

# PIP3 modules
import reportlab.lib.utils
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfgen.canvas
import reportlab.platypus

# local repo modules
import herbarium_reports as hrep
import herbarium_reports.config


PageLayout = hrep.config.PageLayout
mm_to_points = hrep.config.mm_to_points

FONT_REGULAR = hrep.config.FONT_REGULAR
COLOR_BLACK = hrep.config.COLOR_BLACK


@dataclasses.dataclass
class DrawOp:
	kind: str
	x: float = 0.0
	y: float = 0.0
	width: float = 0.0
	height: float = 0.0
	text: str = ""
	font_name: str = FONT_REGULAR
	font_size: float = 10.0
	align: str = "LEFT"
	color: str = COLOR_BLACK
	fill_color: str = ""
	line_width: float = 0.2
	radius: float = 0.0
	x2: float = 0.0
	y2: float = 0.0
	image: reportlab.lib.utils.ImageReader | None = None
	flowable: reportlab.platypus.Flowable | None = None
	tag: str = ""


#============================================
def parse_hex_color(value: str) -> tuple[float, float, float]:
	"""
	Parse a hex color string into RGB floats.

	Args:
		value: Color string like "#AABBCC".

	Returns:
		Tuple of (r, g, b) in 0.0-1.0 range.
	"""
	if not value or not value.startswith("#") or len(value) != 7:
		return (0.0, 0.0, 0.0)
	red = int(value[1:3], 16) / 255.0
	green = int(value[3:5], 16) / 255.0
	blue = int(value[5:7], 16) / 255.0
	return (red, green, blue)


#============================================
def string_width(text: str, font_name: str, font_size: float) -> float:
	"""
	Measure a single line of text.

	Args:
		text: Text content.
		font_name: ReportLab font name.
		font_size: Font size in points.

	Returns:
		Width in millimetres.
	"""
	width_points = reportlab.pdfbase.pdfmetrics.stringWidth(text, font_name, font_size)
	return width_points / mm_to_points(1.0)


#============================================
def measure_wrapped_lines(
	text: str,
	max_width: float,
	font_name: str,
	font_size: float,
) -> list[str]:
	"""
	Wrap text to a column width using the font's metrics.

	Args:
		text: Text to wrap, may contain newlines.
		max_width: Column width in millimetres.
		font_name: ReportLab font name.
		font_size: Font size in points.

	Returns:
		Wrapped lines, empty for blank text.
	"""
	if not text or not text.strip():
		return []
	lines = reportlab.lib.utils.simpleSplit(text, font_name, font_size, mm_to_points(max_width))
	return [line for line in lines if line.strip()]


class DrawingSurface:
	"""
	Page list of recorded draw operations with a current page pointer.
	"""

	def __init__(self, layout: PageLayout | None = None):
		if layout is None:
			layout = hrep.config.build_page_layout()
		self.layout = layout
		self.page_width = layout.width
		self.page_height = layout.height
		self.pages: list[list[DrawOp]] = [[]]
		self._current = 0
		self._tag = ""

	#============================================
	def page_count(self) -> int:
		"""
		Number of realized pages.
		"""
		return len(self.pages)

	#============================================
	def current_page(self) -> int:
		"""
		One-based index of the page receiving draw calls.
		"""
		return self._current + 1

	#============================================
	def add_page(self) -> int:
		"""
		Append a blank page and make it current.

		Returns:
			One-based index of the new page.
		"""
		self.pages.append([])
		self._current = len(self.pages) - 1
		return self._current + 1

	#============================================
	def set_current_page(self, index: int) -> None:
		"""
		Select an existing page for further drawing.

		Args:
			index: One-based page index.
		"""
		if index < 1 or index > len(self.pages):
			raise ValueError(f"Page {index} out of range 1..{len(self.pages)}")
		self._current = index - 1

	#============================================
	def ops(self, index: int | None = None) -> list[DrawOp]:
		"""
		Recorded operations for a page.

		Args:
			index: One-based page index, defaults to the current page.

		Returns:
			List of DrawOp entries.
		"""
		if index is None:
			return self.pages[self._current]
		return self.pages[index - 1]

	#============================================
	def texts(self, index: int | None = None) -> list[str]:
		"""
		Text strings drawn on a page, or on every page when index is None.
		"""
		if index is None:
			pages = self.pages
		else:
			pages = [self.pages[index - 1]]
		return [op.text for page in pages for op in page if op.kind == "text"]

	def _record(self, op: DrawOp) -> None:
		op.tag = self._tag
		self.pages[self._current].append(op)

	#============================================
	@contextlib.contextmanager
	def tagged(self, tag: str):
		"""
		Tag every operation recorded inside the block.

		Args:
			tag: Tag name, used later by discard_tagged().
		"""
		previous = self._tag
		self._tag = tag
		try:
			yield self
		finally:
			self._tag = previous

	#============================================
	def discard_tagged(self, tag: str) -> int:
		"""
		Remove operations carrying a tag from every page.

		Returns:
			Number of removed operations.
		"""
		removed = 0
		for index, page in enumerate(self.pages):
			kept = [op for op in page if op.tag != tag]
			removed += len(page) - len(kept)
			self.pages[index] = kept
		return removed

	#============================================
	def text(
		self,
		text: str,
		x: float,
		y: float,
		font_name: str = FONT_REGULAR,
		font_size: float = 10.0,
		color: str = COLOR_BLACK,
		align: str = "LEFT",
	) -> None:
		"""
		Draw a single line of text at a baseline position.

		Args:
			text: Text content.
			x: Anchor x in millimetres.
			y: Baseline y in millimetres from the top edge.
			font_name: ReportLab font name.
			font_size: Font size in points.
			color: Hex color.
			align: LEFT, CENTER or RIGHT relative to x.
		"""
		self._record(
			DrawOp(
				kind="text",
				x=x,
				y=y,
				text=text,
				font_name=font_name,
				font_size=font_size,
				color=color,
				align=align.upper(),
			)
		)

	#============================================
	def text_lines(
		self,
		lines: list[str],
		x: float,
		y: float,
		line_height: float,
		font_name: str = FONT_REGULAR,
		font_size: float = 10.0,
		color: str = COLOR_BLACK,
		align: str = "LEFT",
	) -> float:
		"""
		Draw consecutive lines starting at a baseline.

		Returns:
			Baseline y following the last line.
		"""
		for index, line in enumerate(lines):
			self.text(line, x, y + index * line_height, font_name, font_size, color, align)
		return y + len(lines) * line_height

	#============================================
	def rect(
		self,
		x: float,
		y: float,
		width: float,
		height: float,
		stroke_color: str = COLOR_BLACK,
		fill_color: str = "",
		line_width: float = 0.2,
		radius: float = 0.0,
	) -> None:
		"""
		Draw a rectangle from its top-left corner.

		Args:
			x: Left edge in millimetres.
			y: Top edge in millimetres from the top of the page.
			width: Width in millimetres.
			height: Height in millimetres.
			stroke_color: Hex border color, empty for no border.
			fill_color: Hex fill color, empty for no fill.
			line_width: Border width in millimetres.
			radius: Corner radius in millimetres.
		"""
		self._record(
			DrawOp(
				kind="rect",
				x=x,
				y=y,
				width=width,
				height=height,
				color=stroke_color,
				fill_color=fill_color,
				line_width=line_width,
				radius=radius,
			)
		)

	#============================================
	def line(
		self,
		x1: float,
		y1: float,
		x2: float,
		y2: float,
		color: str = COLOR_BLACK,
		line_width: float = 0.2,
	) -> None:
		"""
		Draw a straight line.
		"""
		self._record(DrawOp(kind="line", x=x1, y=y1, x2=x2, y2=y2, color=color, line_width=line_width))

	#============================================
	def image(
		self,
		image_reader: reportlab.lib.utils.ImageReader,
		x: float,
		y: float,
		width: float,
		height: float,
	) -> None:
		"""
		Draw a decoded image into a box given by its top-left corner.
		"""
		self._record(DrawOp(kind="image", x=x, y=y, width=width, height=height, image=image_reader))

	#============================================
	def flowable(
		self,
		flowable: reportlab.platypus.Flowable,
		x: float,
		y: float,
		width: float,
		height: float,
	) -> None:
		"""
		Place an already split platypus flowable.
		"""
		self._record(DrawOp(kind="flowable", x=x, y=y, width=width, height=height, flowable=flowable))

	#============================================
	def measure_wrapped_lines(
		self,
		text: str,
		max_width: float,
		font_name: str = FONT_REGULAR,
		font_size: float = 10.0,
	) -> list[str]:
		"""
		Wrap text to a column width.
		"""
		return measure_wrapped_lines(text, max_width, font_name, font_size)

	#============================================
	def render(self, pdf: reportlab.pdfgen.canvas.Canvas) -> None:
		"""
		Replay every recorded page onto a canvas.

		Args:
			pdf: ReportLab canvas sized to the page layout.
		"""
		page_height = mm_to_points(self.page_height)
		for page in self.pages:
			for op in page:
				draw_op(pdf, op, page_height)
			pdf.showPage()

	#============================================
	def save(self, output_path: pathlib.Path | str) -> pathlib.Path:
		"""
		Write the document to a PDF file.

		Args:
			output_path: Output PDF path.

		Returns:
			Output path.
		"""
		output_path = pathlib.Path(output_path)
		pdf = reportlab.pdfgen.canvas.Canvas(
			str(output_path),
			pagesize=(mm_to_points(self.page_width), mm_to_points(self.page_height)),
		)
		self.render(pdf)
		pdf.save()
		return output_path

	#============================================
	def to_bytes(self) -> bytes:
		"""
		Render the document into memory.

		Returns:
			PDF bytes.
		"""
		buffer = io.BytesIO()
		pdf = reportlab.pdfgen.canvas.Canvas(
			buffer,
			pagesize=(mm_to_points(self.page_width), mm_to_points(self.page_height)),
		)
		self.render(pdf)
		pdf.save()
		return buffer.getvalue()


#============================================
def draw_op(pdf: reportlab.pdfgen.canvas.Canvas, op: DrawOp, page_height: float) -> None:
	"""
	Draw one recorded operation onto the canvas.

	Args:
		pdf: ReportLab canvas.
		op: Recorded operation.
		page_height: Page height in points.
	"""
	if op.kind == "text":
		if not op.text:
			return
		color = parse_hex_color(op.color)
		pdf.setFillColorRGB(color[0], color[1], color[2])
		pdf.setFont(op.font_name, op.font_size)
		text_x = mm_to_points(op.x)
		text_y = page_height - mm_to_points(op.y)
		if op.align == "CENTER":
			pdf.drawCentredString(text_x, text_y, op.text)
		elif op.align == "RIGHT":
			pdf.drawRightString(text_x, text_y, op.text)
		else:
			pdf.drawString(text_x, text_y, op.text)
		return
	if op.kind == "rect":
		stroke = 1 if op.color else 0
		fill = 1 if op.fill_color else 0
		if stroke:
			color = parse_hex_color(op.color)
			pdf.setStrokeColorRGB(color[0], color[1], color[2])
			pdf.setLineWidth(mm_to_points(op.line_width))
		if fill:
			color = parse_hex_color(op.fill_color)
			pdf.setFillColorRGB(color[0], color[1], color[2])
		rect_x = mm_to_points(op.x)
		rect_y = page_height - mm_to_points(op.y + op.height)
		if op.radius > 0.0:
			pdf.roundRect(
				rect_x,
				rect_y,
				mm_to_points(op.width),
				mm_to_points(op.height),
				mm_to_points(op.radius),
				stroke=stroke,
				fill=fill,
			)
		else:
			pdf.rect(rect_x, rect_y, mm_to_points(op.width), mm_to_points(op.height), stroke=stroke, fill=fill)
		return
	if op.kind == "line":
		color = parse_hex_color(op.color)
		pdf.setStrokeColorRGB(color[0], color[1], color[2])
		pdf.setLineWidth(mm_to_points(op.line_width))
		pdf.line(
			mm_to_points(op.x),
			page_height - mm_to_points(op.y),
			mm_to_points(op.x2),
			page_height - mm_to_points(op.y2),
		)
		return
	if op.kind == "image":
		if op.image is None:
			return
		pdf.drawImage(
			op.image,
			mm_to_points(op.x),
			page_height - mm_to_points(op.y + op.height),
			width=mm_to_points(op.width),
			height=mm_to_points(op.height),
			mask="auto",
			preserveAspectRatio=True,
			anchor="c",
		)
		return
	if op.kind == "flowable":
		if op.flowable is None:
			return
		width = mm_to_points(op.width)
		height = mm_to_points(op.height)
		op.flowable.wrapOn(pdf, width, height)
		op.flowable.drawOn(pdf, mm_to_points(op.x), page_height - mm_to_points(op.y) - height)
		return
