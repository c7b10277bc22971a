"""
CLI entry points for label sheet generation.
"""

# Standard Library
import argparse
import pathlib
import time

# local repo modules
import label_sheet_generator as lsg
import label_sheet_generator.catalogue
import label_sheet_generator.config
import label_sheet_generator.fonts
import label_sheet_generator.grid
import label_sheet_generator.render


PageLayout = lsg.config.PageLayout
RenderConfig = lsg.config.RenderConfig

DEFAULT_PRESET = lsg.config.DEFAULT_PRESET
DEFAULT_FONT_FAMILY = lsg.config.DEFAULT_FONT_FAMILY
DEFAULT_OUTPUT = lsg.config.DEFAULT_OUTPUT
DEFAULT_TEXT_SIZE = lsg.config.DEFAULT_TEXT_SIZE
DEFAULT_TEXT_MIN_SIZE = lsg.config.DEFAULT_TEXT_MIN_SIZE


#============================================
def non_negative_int(value: str) -> int:
	"""
	Parse a non-negative integer argument.

	Args:
		value: Raw argument text.

	Returns:
		Parsed integer.
	"""
	try:
		number = int(value)
	except ValueError as exc:
		raise argparse.ArgumentTypeError(f"expected an integer, got '{value}'") from exc
	if number < 0:
		raise argparse.ArgumentTypeError(f"must not be negative, got {number}")
	return number


#============================================
def parse_label_line(line: str) -> str:
	"""
	Turn one input line into label text.

	Args:
		line: Raw line; a literal backslash-n starts a new label line.

	Returns:
		Label text.
	"""
	return line.strip().replace("\\n", "\n")


#============================================
def read_label_texts(paths: list[str], texts: list[str] | None = None) -> list[str]:
	"""
	Collect label texts from files and inline values.

	Args:
		paths: Text files, one label per non-empty line.
		texts: Inline label texts, appended after file labels.

	Returns:
		Label texts in fill order.
	"""
	labels = []
	for path in paths:
		with pathlib.Path(path).open("r", encoding="utf-8") as handle:
			for line in handle:
				if line.strip():
					labels.append(parse_label_line(line))
	for text in texts or []:
		labels.append(parse_label_line(text))
	return labels


#============================================
def build_layout(args: argparse.Namespace) -> PageLayout:
	"""
	Build the page layout from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		PageLayout.
	"""
	if args.layout_json:
		return lsg.config.load_layout_json(pathlib.Path(args.layout_json))
	return lsg.config.get_preset(args.preset)


#============================================
def build_render_config(args: argparse.Namespace) -> RenderConfig:
	"""
	Build render config from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		RenderConfig.
	"""
	return RenderConfig(
		font_size=args.font_size,
		min_font_size=min(args.min_font_size, args.font_size),
		draw_outlines=args.draw_outlines,
		calibration=args.calibration,
		include_partial=args.include_partial,
		max_pages=args.max_pages,
	)


#============================================
def build_catalogue(args: argparse.Namespace) -> lsg.catalogue.SystemFontCatalogue:
	"""
	Build the font catalogue from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		SystemFontCatalogue.
	"""
	font_dirs = lsg.catalogue.default_font_dirs()
	if args.font_dirs:
		font_dirs = [pathlib.Path(font_dir) for font_dir in args.font_dirs] + font_dirs
	return lsg.catalogue.SystemFontCatalogue(font_dirs)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Argument list, defaults to sys.argv.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Print label text onto Avery-style label sheets as PDF.")
	parser.add_argument("inputs", nargs="*", help="Text files with one label per line.")

	input_group = parser.add_argument_group("Input")
	input_group.add_argument("-t", "--text", dest="texts", action="append", default=[], help="Label text; repeatable. Use \\n for line breaks.")
	input_group.add_argument("-s", "--preset", dest="preset", default=DEFAULT_PRESET, help="Named sheet layout.")
	input_group.add_argument("-j", "--layout-json", dest="layout_json", default=None, help="Sheet layout JSON file, overrides --preset.")
	input_group.add_argument("-f", "--font-family", dest="font_family", default=DEFAULT_FONT_FAMILY, help="Font family name.")
	input_group.add_argument("-F", "--font-dir", dest="font_dirs", action="append", default=[], help="Extra font directory; repeatable.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", default=DEFAULT_OUTPUT, help="Output PDF path.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")

	behavior_group = parser.add_argument_group("Behavior")
	behavior_group.add_argument("-d", "--draw-outlines", dest="draw_outlines", action="store_true", help="Draw label outlines.")
	behavior_group.add_argument("-D", "--no-draw-outlines", dest="draw_outlines", action="store_false", help="Disable label outlines.")
	behavior_group.add_argument("-c", "--calibration", dest="calibration", action="store_true", help="Add a calibration page.")
	behavior_group.add_argument("-C", "--no-calibration", dest="calibration", action="store_false", help="Disable calibration page.")
	behavior_group.add_argument("-p", "--include-partial", dest="include_partial", action="store_true", help="Include a partial final sheet.")
	behavior_group.add_argument("-P", "--no-include-partial", dest="include_partial", action="store_false", help="Exclude partial final sheet.")
	behavior_group.add_argument("-z", "--font-size", dest="font_size", type=float, default=DEFAULT_TEXT_SIZE, help="Starting font size in points.")
	behavior_group.add_argument("-Z", "--min-font-size", dest="min_font_size", type=float, default=DEFAULT_TEXT_MIN_SIZE, help="Smallest font size when shrinking to fit.")

	limit_group = parser.add_argument_group("Limits")
	limit_group.add_argument("-g", "--max-pages", dest="max_pages", type=non_negative_int, default=None, help="Limit number of label sheets.")

	parser.set_defaults(
		draw_outlines=False,
		calibration=False,
		include_partial=True,
	)

	args = parser.parse_args(argv)
	return args


#============================================
def run_pipeline(args: argparse.Namespace) -> lsg.config.RenderResult:
	"""
	Run the full pipeline from label text to PDF.

	Args:
		args: Parsed argparse namespace.

	Returns:
		RenderResult.
	"""
	start_time = time.perf_counter()
	try:
		layout = build_layout(args)
	except (lsg.config.LayoutError, OSError) as exc:
		raise SystemExit(f"Invalid layout: {exc}") from exc

	rows, columns = lsg.grid.compute_grid_counts(layout)
	print(f"Layout: {layout.name}")
	print(f"Grid: {rows} rows x {columns} columns")
	if rows * columns == 0:
		print("Warning: label does not fit the printable area; no labels will be placed.")
	print(f"Output PDF: {args.output_path}")

	try:
		texts = read_label_texts(args.inputs, args.texts)
	except (OSError, UnicodeDecodeError) as exc:
		raise SystemExit(f"Failed to read labels: {exc}") from exc
	print(f"Labels collected: {len(texts)}")

	catalogue = build_catalogue(args)
	try:
		family = lsg.fonts.resolve_font_family(args.font_family, catalogue)
	except lsg.fonts.FontError as exc:
		raise SystemExit(f"Failed to load font family: {exc}") from exc
	for slot, font_name in family.font_names().items():
		print(f"Font {slot}: {font_name}")

	config = build_render_config(args)
	output_path = pathlib.Path(args.output_path)
	render_start = time.perf_counter()
	result = lsg.render.render_labels_to_pdf(texts, output_path, layout, family, config)
	render_end = time.perf_counter()
	print(f"Pages written: {result.pages}")
	print(f"Labels printed: {result.printed_labels}")
	print(f"Labels leftover: {result.leftover_labels}")

	if args.manifest_path:
		lsg.render.write_manifest(pathlib.Path(args.manifest_path), layout, family, result, config)
		print(f"Manifest written: {args.manifest_path}")

	total_time = time.perf_counter() - start_time
	print(
		"Timing: render={:.2f}s total={:.2f}s".format(
			render_end - render_start,
			total_time,
		)
	)
	return result


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	run_pipeline(args)
