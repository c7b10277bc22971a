"""
Rendering of label sheets to PDF.
"""

# Standard Library
import json
import pathlib

# PIP3 modules
import reportlab.lib.units
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfgen.canvas

# local repo modules
import label_sheet_generator as lsg
import label_sheet_generator.config
import label_sheet_generator.fonts
import label_sheet_generator.grid


PageLayout = lsg.config.PageLayout
LabelCell = lsg.config.LabelCell
RenderConfig = lsg.config.RenderConfig
RenderResult = lsg.config.RenderResult
ResolvedFontFamily = lsg.fonts.ResolvedFontFamily

DEFAULT_TEXT_STEP = lsg.config.DEFAULT_TEXT_STEP
DEFAULT_LEADING_FACTOR = lsg.config.DEFAULT_LEADING_FACTOR
OUTLINE_LINE_WIDTH = lsg.config.OUTLINE_LINE_WIDTH
CALIBRATION_CROSSHAIR_SIZE = lsg.config.CALIBRATION_CROSSHAIR_SIZE


#============================================
def to_points(inches: float) -> float:
	"""
	Convert inches to PDF points through millimeters.

	Args:
		inches: Inches value.

	Returns:
		Points value.
	"""
	return lsg.config.inches_to_mm(inches) * reportlab.lib.units.mm


#============================================
def page_size_points(layout: PageLayout) -> tuple[float, float]:
	"""
	Compute the page size of a layout in points.

	Args:
		layout: Page layout.

	Returns:
		Tuple of (width, height).
	"""
	return (to_points(layout.width), to_points(layout.height))


#============================================
def cell_rect_points(cell: LabelCell, page_height: float) -> tuple[float, float, float, float]:
	"""
	Convert a top-left based cell to a PDF rectangle.

	Args:
		cell: Label cell in inches.
		page_height: Page height in points.

	Returns:
		Tuple of (x, y, width, height) with y at the bottom edge.
	"""
	x = to_points(cell.x)
	y = page_height - to_points(cell.bottom)
	return (x, y, to_points(cell.width), to_points(cell.height))


#============================================
def split_label_text(text: str) -> list[str]:
	"""
	Split label text into lines, dropping trailing blank lines.

	Args:
		text: Label text.

	Returns:
		List of lines.
	"""
	lines = [line.rstrip() for line in text.splitlines()]
	while lines and not lines[-1]:
		lines.pop()
	return lines


#============================================
def line_font_names(line_count: int, family: ResolvedFontFamily) -> list[str]:
	"""
	Pick a font for each line: bold for the first, regular after.

	Args:
		line_count: Number of lines.
		family: Resolved font family.

	Returns:
		List of font names.
	"""
	names = family.font_names()
	return [names["bold"] if index == 0 else names["regular"] for index in range(line_count)]


#============================================
def fit_font_size(
	lines: list[str],
	font_names: list[str],
	max_width: float,
	max_height: float,
	font_size: float,
	min_font_size: float,
) -> float:
	"""
	Find the largest font size that fits a block of lines.

	Args:
		lines: Text lines.
		font_names: Font name per line.
		max_width: Available width in points.
		max_height: Available height in points.
		font_size: Starting font size.
		min_font_size: Smallest allowed font size.

	Returns:
		Chosen font size, never below min_font_size.
	"""
	size = font_size
	while size > min_font_size:
		widest = max(
			reportlab.pdfbase.pdfmetrics.stringWidth(line, font_name, size)
			for line, font_name in zip(lines, font_names)
		)
		block_height = size + size * DEFAULT_LEADING_FACTOR * (len(lines) - 1)
		if widest <= max_width and block_height <= max_height:
			return size
		size -= DEFAULT_TEXT_STEP
	return min_font_size


#============================================
def draw_label_text(
	pdf: reportlab.pdfgen.canvas.Canvas,
	text: str,
	cell: LabelCell,
	page_height: float,
	family: ResolvedFontFamily,
	config: RenderConfig,
) -> float | None:
	"""
	Draw label text inside a cell, vertically centered.

	Args:
		pdf: ReportLab canvas.
		text: Label text, one line per newline.
		cell: Target cell.
		page_height: Page height in points.
		family: Resolved font family.
		config: Render configuration.

	Returns:
		Font size used, or None when there was nothing to draw.
	"""
	lines = split_label_text(text)
	if not lines:
		return None
	x, y, width, height = cell_rect_points(cell, page_height)
	inset = to_points(config.inset)
	box_width = max(width - 2.0 * inset, 0.0)
	box_height = max(height - 2.0 * inset, 0.0)

	font_names = line_font_names(len(lines), family)
	size = fit_font_size(lines, font_names, box_width, box_height, config.font_size, config.min_font_size)
	leading = size * DEFAULT_LEADING_FACTOR
	block_height = size + leading * (len(lines) - 1)
	offset = max((box_height - block_height) / 2.0, 0.0)
	ascent = reportlab.pdfbase.pdfmetrics.getAscent(font_names[0], size)

	baseline = y + height - inset - offset - ascent
	for line, font_name in zip(lines, font_names):
		pdf.setFont(font_name, size)
		pdf.drawString(x + inset, baseline, line)
		baseline -= leading
	return size


#============================================
def draw_label_outlines(pdf: reportlab.pdfgen.canvas.Canvas, cells: list[LabelCell], page_height: float) -> None:
	"""
	Draw label outlines on the current page.

	Args:
		pdf: ReportLab canvas.
		cells: Label cells.
		page_height: Page height in points.
	"""
	pdf.saveState()
	pdf.setLineWidth(OUTLINE_LINE_WIDTH)
	pdf.setStrokeColorRGB(0.7, 0.7, 0.7)
	for cell in cells:
		x, y, width, height = cell_rect_points(cell, page_height)
		pdf.rect(x, y, width, height, stroke=1, fill=0)
	pdf.restoreState()


#============================================
def draw_calibration_page(
	pdf: reportlab.pdfgen.canvas.Canvas,
	layout: PageLayout,
	family: ResolvedFontFamily,
) -> None:
	"""
	Draw cell outlines, corner crosshairs and a 1 inch ruler mark.

	Args:
		pdf: ReportLab canvas.
		layout: Page layout.
		family: Resolved font family.
	"""
	_, page_height = page_size_points(layout)
	cells = lsg.grid.compute_grid(layout)
	rows, columns = lsg.grid.compute_grid_counts(layout)
	draw_label_outlines(pdf, cells, page_height)

	pdf.setLineWidth(0.6)
	pdf.setStrokeColorRGB(0.0, 0.0, 0.0)
	corners = set()
	if cells:
		corners = {(0, 0), (0, columns - 1), (rows - 1, 0), (rows - 1, columns - 1)}
	for row, col in sorted(corners):
		x, y, width, height = cell_rect_points(cells[row * columns + col], page_height)
		center_x = x + width / 2.0
		center_y = y + height / 2.0
		size = CALIBRATION_CROSSHAIR_SIZE
		pdf.line(center_x - size, center_y, center_x + size, center_y)
		pdf.line(center_x, center_y - size, center_x, center_y + size)

	ruler_x = to_points(layout.margin.left)
	ruler_y = page_height - to_points(layout.margin.top) + 10.0
	pdf.line(ruler_x, ruler_y, ruler_x + to_points(1.0), ruler_y)
	pdf.setFont(family.regular.fontName, 8)
	pdf.drawString(ruler_x, ruler_y + 4.0, "1 in")


#============================================
def count_printable_labels(total_labels: int, labels_per_page: int, config: RenderConfig) -> int:
	"""
	Count how many labels will be placed on sheets.

	Args:
		total_labels: Number of labels requested.
		labels_per_page: Cells per sheet.
		config: Render configuration.

	Returns:
		Number of labels to print.
	"""
	if labels_per_page <= 0:
		return 0
	labels_to_print = total_labels
	if config.max_pages is not None:
		labels_to_print = min(labels_to_print, max(config.max_pages, 0) * labels_per_page)
	if not config.include_partial:
		labels_to_print = (labels_to_print // labels_per_page) * labels_per_page
	return labels_to_print


#============================================
def render_labels_to_pdf(
	texts: list[str],
	output_path: pathlib.Path,
	layout: PageLayout,
	family: ResolvedFontFamily,
	config: RenderConfig,
) -> RenderResult:
	"""
	Render label texts onto label sheets in a PDF.

	Args:
		texts: Label texts in fill order.
		output_path: Output PDF path.
		layout: Page layout.
		family: Resolved font family.
		config: Render configuration.

	Returns:
		RenderResult.
	"""
	page_width, page_height = page_size_points(layout)
	pdf = reportlab.pdfgen.canvas.Canvas(str(output_path), pagesize=(page_width, page_height))
	pdf.setTitle(config.title)
	family.register()

	pages = 0
	if config.calibration:
		draw_calibration_page(pdf, layout, family)
		pdf.showPage()
		pages += 1

	cells = lsg.grid.compute_grid(layout)
	labels_per_page = len(cells)
	labels_to_print = count_printable_labels(len(texts), labels_per_page, config)

	sheets = [
		texts[start:start + labels_per_page]
		for start in range(0, labels_to_print, labels_per_page)
	]
	if not sheets and pages == 0:
		# always emit at least one page
		sheets = [[]]
	for sheet in sheets:
		if config.draw_outlines:
			draw_label_outlines(pdf, cells, page_height)
		for cell, text in zip(cells, sheet):
			draw_label_text(pdf, text, cell, page_height, family, config)
		pdf.showPage()
		pages += 1
	pdf.save()

	result = RenderResult(
		total_labels=len(texts),
		printed_labels=labels_to_print,
		leftover_labels=len(texts) - labels_to_print,
		pages=pages,
		labels_per_page=labels_per_page,
	)
	return result


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	layout: PageLayout,
	family: ResolvedFontFamily,
	result: RenderResult,
	config: RenderConfig,
) -> None:
	"""
	Write a manifest JSON file.

	Args:
		manifest_path: Output path.
		layout: Page layout.
		family: Resolved font family.
		result: Render result.
		config: Render configuration.
	"""
	rows, columns = lsg.grid.compute_grid_counts(layout)
	data = {
		"labels_per_page": result.labels_per_page,
		"total_labels": result.total_labels,
		"printed_labels": result.printed_labels,
		"leftover_labels": result.leftover_labels,
		"pages": result.pages,
		"layout": lsg.config.layout_to_dict(layout),
		"grid": {
			"rows": rows,
			"columns": columns,
		},
		"render": {
			"font_size": config.font_size,
			"min_font_size": config.min_font_size,
			"inset": config.inset,
			"draw_outlines": config.draw_outlines,
			"calibration": config.calibration,
			"include_partial": config.include_partial,
			"max_pages": config.max_pages,
		},
		"fonts": {
			"family": family.family_name,
			**family.font_names(),
		},
	}
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)
