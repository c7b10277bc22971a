import itertools
import math

import pytest

import label_sheet_generator.config
import label_sheet_generator.grid


config = label_sheet_generator.config
grid = label_sheet_generator.grid


#============================================
def build_layout(
	label_width: float,
	label_height: float,
	row_spacing: float = 0.0,
	column_spacing: float = 0.0,
	margins: tuple[float, float, float, float] = (0.5, 0.125, 0.5, 0.125),
	page: tuple[float, float] = (8.5, 11.0),
) -> config.PageLayout:
	"""
	Build a page layout for tests.

	Args:
		label_width: Label width in inches.
		label_height: Label height in inches.
		row_spacing: Gap between rows.
		column_spacing: Gap between columns.
		margins: Top, right, bottom, left margins.
		page: Page width and height.

	Returns:
		PageLayout.
	"""
	top, right, bottom, left = margins
	return config.PageLayout(
		name="test",
		width=page[0],
		height=page[1],
		margin=config.Margins(top=top, right=right, bottom=bottom, left=left),
		label_size=config.BoundingBox(width=label_width, height=label_height),
		row_spacing=row_spacing,
		column_spacing=column_spacing,
	)


SAMPLE_LAYOUTS = [
	config.AVERY_18160,
	build_layout(4.0, 2.0, row_spacing=0.0, column_spacing=0.16, margins=(0.5, 0.17, 0.5, 0.17)),
	build_layout(1.75, 0.5, row_spacing=0.0, column_spacing=0.3, margins=(0.5, 0.3, 0.5, 0.3)),
	build_layout(2.0, 3.0, row_spacing=0.2, column_spacing=0.2),
	build_layout(3.5, 1.25, row_spacing=0.1, column_spacing=0.0, page=(8.27, 11.69)),
	build_layout(8.25, 10.0),
	build_layout(9.0, 1.0),
	build_layout(2.0, 10.5),
]


#============================================
def test_avery_18160_example() -> None:
	"""
	Check the worked Avery 18160 sheet.
	"""
	layout = config.AVERY_18160
	assert layout.printable_width == pytest.approx(8.25)
	assert layout.printable_height == pytest.approx(10.0)
	assert grid.compute_grid_counts(layout) == (10, 2)

	cells = grid.compute_grid(layout)
	assert len(cells) == 20
	assert cells[0].x == pytest.approx(0.125)
	assert cells[0].y == pytest.approx(0.5)
	assert cells[1].x == pytest.approx(3.0)
	assert cells[1].y == pytest.approx(0.5)
	assert cells[2].x == pytest.approx(0.125)
	assert cells[2].y == pytest.approx(1.5)
	for cell in cells:
		assert cell.width == pytest.approx(2.625)
		assert cell.height == pytest.approx(1.0)


#============================================
@pytest.mark.parametrize("layout", SAMPLE_LAYOUTS)
def test_cell_count_matches_floor_formula(layout: config.PageLayout) -> None:
	"""
	Cell count equals rows times columns from the floor formulas.
	"""
	label = layout.label_size
	columns = math.floor(
		(layout.printable_width + layout.column_spacing) / (label.width + layout.column_spacing) + 1e-9
	)
	rows = math.floor(
		(layout.printable_height + layout.row_spacing) / (label.height + layout.row_spacing) + 1e-9
	)
	cells = grid.compute_grid(layout)
	assert len(cells) == max(rows, 0) * max(columns, 0)
	assert grid.compute_grid_counts(layout) == (max(rows, 0), max(columns, 0))


#============================================
@pytest.mark.parametrize("layout", SAMPLE_LAYOUTS)
def test_cells_do_not_overlap(layout: config.PageLayout) -> None:
	"""
	No two cells share any area.
	"""
	cells = grid.compute_grid(layout)
	for cell_a, cell_b in itertools.combinations(cells, 2):
		assert not grid.cells_intersect(cell_a, cell_b)


#============================================
@pytest.mark.parametrize("layout", SAMPLE_LAYOUTS)
def test_cells_within_printable_area(layout: config.PageLayout) -> None:
	"""
	Every cell stays inside the page margins.
	"""
	for cell in grid.compute_grid(layout):
		assert grid.cell_within_printable_area(layout, cell)
		assert cell.right <= layout.width - layout.margin.right + 1e-6
		assert cell.bottom <= layout.height - layout.margin.bottom + 1e-6


#============================================
@pytest.mark.parametrize("layout", SAMPLE_LAYOUTS)
def test_row_major_order(layout: config.PageLayout) -> None:
	"""
	Cells fill left to right, then top to bottom.
	"""
	cells = grid.compute_grid(layout)
	positions = [(cell.y, cell.x) for cell in cells]
	assert positions == sorted(positions)


#============================================
def test_exact_fit_keeps_full_cell() -> None:
	"""
	A label the size of the printable area yields one cell.
	"""
	layout = build_layout(8.25, 10.0)
	cells = grid.compute_grid(layout)
	assert len(cells) == 1
	assert cells[0].x == pytest.approx(0.125)
	assert cells[0].y == pytest.approx(0.5)


#============================================
def test_oversized_label_yields_no_cells() -> None:
	"""
	Labels wider or taller than the printable area give an empty grid.
	"""
	assert grid.compute_grid(build_layout(9.0, 1.0)) == []
	assert grid.compute_grid(build_layout(2.0, 10.5)) == []
	assert grid.compute_grid(build_layout(8.3, 1.0, column_spacing=0.25)) == []


#============================================
def test_compute_grid_is_deterministic() -> None:
	"""
	Repeated calls return equal sequences.
	"""
	for layout in SAMPLE_LAYOUTS:
		assert grid.compute_grid(layout) == grid.compute_grid(layout)


#============================================
def test_cells_intersect_detects_overlap() -> None:
	"""
	Overlapping cells intersect, touching cells do not.
	"""
	cell = config.LabelCell(x=0.0, y=0.0, width=1.0, height=1.0)
	overlapping = config.LabelCell(x=0.5, y=0.5, width=1.0, height=1.0)
	touching = config.LabelCell(x=1.0, y=0.0, width=1.0, height=1.0)
	assert grid.cells_intersect(cell, overlapping)
	assert not grid.cells_intersect(cell, touching)


#============================================
def test_fit_count_edge_cases() -> None:
	"""
	Fit counting clamps to zero and counts spacing between items only.
	"""
	assert grid.fit_count(0.0, 1.0, 0.0) == 0
	assert grid.fit_count(1.0, 2.0, 0.0) == 0
	assert grid.fit_count(5.0, 1.0, 0.0) == 5
	assert grid.fit_count(5.0, 1.0, 1.0) == 3
	assert grid.fit_count(4.9, 1.0, 1.0) == 2
