"""
Label grid geometry.
"""

# Standard Library
import math

# local repo modules
import label_sheet_generator as lsg
import label_sheet_generator.config


PageLayout = lsg.config.PageLayout
LabelCell = lsg.config.LabelCell

GRID_EPSILON = lsg.config.GRID_EPSILON


#============================================
def fit_count(available: float, size: float, spacing: float) -> int:
	"""
	Count how many items of a size fit along one axis.

	Each item but the last is followed by spacing, so the spacing is added
	to the available length once before dividing.

	Args:
		available: Available length.
		size: Item length.
		spacing: Gap between items.

	Returns:
		Item count, never negative.
	"""
	pitch = size + spacing
	if pitch <= 0.0 or available <= 0.0:
		return 0
	count = math.floor((available + spacing) / pitch + GRID_EPSILON)
	return max(count, 0)


#============================================
def compute_grid_counts(layout: PageLayout) -> tuple[int, int]:
	"""
	Compute how many label rows and columns fit the printable area.

	Args:
		layout: Page layout.

	Returns:
		Tuple of (rows, columns).
	"""
	columns = fit_count(layout.printable_width, layout.label_size.width, layout.column_spacing)
	rows = fit_count(layout.printable_height, layout.label_size.height, layout.row_spacing)
	return (rows, columns)


#============================================
def compute_grid(layout: PageLayout) -> list[LabelCell]:
	"""
	Compute the label cells of one sheet in fill order.

	Cells run left to right along a row, rows run top to bottom. A label
	that does not fit the printable area yields an empty list.

	Args:
		layout: Page layout.

	Returns:
		List of LabelCell entries.
	"""
	rows, columns = compute_grid_counts(layout)
	label_width = layout.label_size.width
	label_height = layout.label_size.height
	cells = []
	for row in range(rows):
		cell_y = layout.margin.top + row * (label_height + layout.row_spacing)
		for col in range(columns):
			cell_x = layout.margin.left + col * (label_width + layout.column_spacing)
			cells.append(LabelCell(x=cell_x, y=cell_y, width=label_width, height=label_height))
	return cells


#============================================
def cells_intersect(cell_a: LabelCell, cell_b: LabelCell) -> bool:
	"""
	Check whether two cells overlap.

	Args:
		cell_a: First cell.
		cell_b: Second cell.

	Returns:
		True if the cells share a region of positive area.
	"""
	left = max(cell_a.x, cell_b.x)
	right = min(cell_a.right, cell_b.right)
	top = max(cell_a.y, cell_b.y)
	bottom = min(cell_a.bottom, cell_b.bottom)
	return right - left > GRID_EPSILON and bottom - top > GRID_EPSILON


#============================================
def cell_within_printable_area(layout: PageLayout, cell: LabelCell) -> bool:
	"""
	Check that a cell lies inside the margins of a page.

	Args:
		layout: Page layout.
		cell: Label cell.

	Returns:
		True if the cell is fully inside the printable area.
	"""
	if cell.x < layout.margin.left - GRID_EPSILON:
		return False
	if cell.y < layout.margin.top - GRID_EPSILON:
		return False
	if cell.right > layout.width - layout.margin.right + GRID_EPSILON:
		return False
	return cell.bottom <= layout.height - layout.margin.bottom + GRID_EPSILON
