"""
Shared configuration, page layout presets and constants.
"""

# Standard Library
import dataclasses
import json
import math
import pathlib


MM_PER_INCH = 25.4
GRID_EPSILON = 1e-9

DEFAULT_PRESET = "avery-18160"
DEFAULT_FONT_FAMILY = "Arial"
DEFAULT_OUTPUT = "output.pdf"
DEFAULT_TITLE = "Generated Document"
DEFAULT_TEXT_SIZE = 12.0
DEFAULT_TEXT_MIN_SIZE = 6.0
DEFAULT_TEXT_STEP = 0.5
DEFAULT_LEADING_FACTOR = 1.2
# inches
DEFAULT_INSET = 0.0625
OUTLINE_LINE_WIDTH = 0.3
CALIBRATION_CROSSHAIR_SIZE = 6.0


class LayoutError(ValueError):
	"""
	Raised when a page layout is inconsistent or cannot be loaded.
	"""


@dataclasses.dataclass(frozen=True)
class Margins:
	top: float
	right: float
	bottom: float
	left: float


@dataclasses.dataclass(frozen=True)
class BoundingBox:
	width: float
	height: float


@dataclasses.dataclass(frozen=True)
class PageLayout:
	"""
	Page and label geometry for one label sheet, in inches.
	"""
	name: str
	width: float
	height: float
	margin: Margins
	label_size: BoundingBox
	row_spacing: float
	column_spacing: float

	def __post_init__(self) -> None:
		validate_layout(self)

	@property
	def printable_width(self) -> float:
		return self.width - self.margin.left - self.margin.right

	@property
	def printable_height(self) -> float:
		return self.height - self.margin.top - self.margin.bottom


@dataclasses.dataclass(frozen=True)
class LabelCell:
	"""
	One label slot; x/y measured in inches from the top-left page corner.
	"""
	x: float
	y: float
	width: float
	height: float

	@property
	def right(self) -> float:
		return self.x + self.width

	@property
	def bottom(self) -> float:
		return self.y + self.height


@dataclasses.dataclass
class RenderConfig:
	font_size: float = DEFAULT_TEXT_SIZE
	min_font_size: float = DEFAULT_TEXT_MIN_SIZE
	inset: float = DEFAULT_INSET
	draw_outlines: bool = False
	calibration: bool = False
	include_partial: bool = True
	max_pages: int | None = None
	title: str = DEFAULT_TITLE


@dataclasses.dataclass
class RenderResult:
	total_labels: int
	printed_labels: int
	leftover_labels: int
	pages: int
	labels_per_page: int


#============================================
def validate_layout(layout: PageLayout) -> None:
	"""
	Check the invariants of a page layout.

	Args:
		layout: Page layout to check.

	Raises:
		LayoutError: When a dimension is out of range.
	"""
	values = {
		"width": layout.width,
		"height": layout.height,
		"top margin": layout.margin.top,
		"right margin": layout.margin.right,
		"bottom margin": layout.margin.bottom,
		"left margin": layout.margin.left,
		"label width": layout.label_size.width,
		"label height": layout.label_size.height,
		"row spacing": layout.row_spacing,
		"column spacing": layout.column_spacing,
	}
	for field_name, value in values.items():
		if not math.isfinite(value):
			raise LayoutError(f"{layout.name}: {field_name} must be a finite number, got {value}")
	if layout.width <= 0.0 or layout.height <= 0.0:
		raise LayoutError(f"{layout.name}: page size must be positive, got {layout.width} x {layout.height}")
	margin = layout.margin
	for side in ("top", "right", "bottom", "left"):
		if getattr(margin, side) < 0.0:
			raise LayoutError(f"{layout.name}: {side} margin must not be negative")
	if margin.top + margin.bottom >= layout.height:
		raise LayoutError(f"{layout.name}: top and bottom margins leave no printable height")
	if margin.left + margin.right >= layout.width:
		raise LayoutError(f"{layout.name}: left and right margins leave no printable width")
	if layout.label_size.width <= 0.0 or layout.label_size.height <= 0.0:
		raise LayoutError(f"{layout.name}: label size must be positive")
	if layout.row_spacing < 0.0 or layout.column_spacing < 0.0:
		raise LayoutError(f"{layout.name}: label spacing must not be negative")


# Avery 18160 address labels, 2 columns of 10 labels, 2 5/8 x 1 inch, on US letter.
# https://www.avery.com/templates/18160
AVERY_18160 = PageLayout(
	name="Avery 18160",
	width=8.5,
	height=11.0,
	margin=Margins(top=0.5, right=0.125, bottom=0.5, left=0.125),
	label_size=BoundingBox(width=2.0 + (5.0 / 8.0), height=1.0),
	row_spacing=0.0,
	column_spacing=0.25,
)

PRESETS = {
	"avery-18160": AVERY_18160,
}


#============================================
def get_preset(name: str) -> PageLayout:
	"""
	Look up a named page layout preset.

	Args:
		name: Preset name, case-insensitive.

	Returns:
		PageLayout.
	"""
	key = name.strip().lower()
	layout = PRESETS.get(key)
	if layout is None:
		available = ", ".join(sorted(PRESETS))
		raise LayoutError(f"Unknown layout preset '{name}'. Available: {available}")
	return layout


#============================================
def inches_to_mm(value: float) -> float:
	"""
	Convert inches to millimeters.

	Args:
		value: Inches value.

	Returns:
		Millimeters value.
	"""
	return value * MM_PER_INCH


#============================================
def layout_to_dict(layout: PageLayout) -> dict:
	"""
	Serialize a page layout to plain JSON types.

	Args:
		layout: Page layout.

	Returns:
		Dictionary payload.
	"""
	return {
		"name": layout.name,
		"width": layout.width,
		"height": layout.height,
		"margin": dataclasses.asdict(layout.margin),
		"label_size": dataclasses.asdict(layout.label_size),
		"row_spacing": layout.row_spacing,
		"column_spacing": layout.column_spacing,
	}


#============================================
def layout_from_dict(data: dict, default_name: str = "custom") -> PageLayout:
	"""
	Build a page layout from a dictionary payload.

	Args:
		data: Payload shaped like layout_to_dict output.
		default_name: Name used when the payload has none.

	Returns:
		PageLayout.
	"""
	try:
		margin = data["margin"]
		label_size = data["label_size"]
		layout = PageLayout(
			name=str(data.get("name", default_name)),
			width=float(data["width"]),
			height=float(data["height"]),
			margin=Margins(
				top=float(margin["top"]),
				right=float(margin["right"]),
				bottom=float(margin["bottom"]),
				left=float(margin["left"]),
			),
			label_size=BoundingBox(
				width=float(label_size["width"]),
				height=float(label_size["height"]),
			),
			row_spacing=float(data.get("row_spacing", 0.0)),
			column_spacing=float(data.get("column_spacing", 0.0)),
		)
	except LayoutError:
		raise
	except KeyError as exc:
		raise LayoutError(f"Layout is missing required key {exc}") from exc
	except (TypeError, ValueError) as exc:
		raise LayoutError(f"Layout has an invalid value: {exc}") from exc
	return layout


#============================================
def load_layout_json(path: pathlib.Path) -> PageLayout:
	"""
	Load a page layout from a JSON file.

	Args:
		path: JSON file path.

	Returns:
		PageLayout.
	"""
	try:
		with path.open("r", encoding="utf-8") as handle:
			data = json.load(handle)
	except json.JSONDecodeError as exc:
		raise LayoutError(f"{path}: invalid JSON: {exc}") from exc
	except UnicodeDecodeError as exc:
		raise LayoutError(f"{path}: not UTF-8 text: {exc}") from exc
	if not isinstance(data, dict):
		raise LayoutError(f"{path}: expected a JSON object")
	return layout_from_dict(data, default_name=path.stem)


#============================================
def write_layout_json(path: pathlib.Path, layout: PageLayout) -> None:
	"""
	Write a page layout to a JSON file.

	Args:
		path: Output path.
		layout: Page layout.
	"""
	with path.open("w", encoding="utf-8") as handle:
		json.dump(layout_to_dict(layout), handle, indent=2, sort_keys=True)
