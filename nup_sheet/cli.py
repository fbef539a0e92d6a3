"""
CLI entry points for tiling images onto A4 sheets.
"""

# Standard Library
import argparse
import json
import math
import pathlib
import time

# local repo modules
import nup_sheet as nups
import nup_sheet.config
import nup_sheet.decode
import nup_sheet.document
import nup_sheet.geometry
import nup_sheet.layout
import nup_sheet.screen
import nup_sheet.session


RenderConfig = nups.config.RenderConfig
DocumentResult = nups.document.DocumentResult
GridDescriptor = nups.geometry.GridDescriptor
ImportReport = nups.session.ImportReport

SUPPORTED_MODES = nups.config.SUPPORTED_MODES
DEFAULT_MODE = nups.config.DEFAULT_MODE
DEFAULT_MARGIN_MM = nups.config.DEFAULT_MARGIN_MM
DEFAULT_SPACING_MM = nups.config.DEFAULT_SPACING_MM
PROGRESS_BAR_WIDTH = nups.config.PROGRESS_BAR_WIDTH
PROGRESS_UPDATE_EVERY = nups.config.PROGRESS_UPDATE_EVERY


#============================================
def non_negative_mm(value: str) -> float:
	"""
	Parse a length in mm that must not be negative.

	Args:
		value: Command line text.

	Returns:
		Length in mm.
	"""
	try:
		length = float(value)
	except ValueError as error:
		raise argparse.ArgumentTypeError(f"invalid length {value!r}") from error
	if not math.isfinite(length) or length < 0.0:
		raise argparse.ArgumentTypeError(f"length must be a non-negative number, got {value!r}")
	return length


#============================================
def build_config(args: argparse.Namespace) -> RenderConfig:
	"""
	Build render config from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		RenderConfig.
	"""
	manifest_path = args.manifest_path
	if manifest_path is None:
		manifest_path = f"{args.output_path}.json"
	config = RenderConfig(
		mode=args.mode,
		show_guides=args.show_guides,
		margin=args.margin,
		spacing=args.spacing,
		output_path=args.output_path,
		preview_path=args.preview_path,
		manifest_path=manifest_path,
	)
	return config


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Optional argument list, defaults to sys.argv.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Tile images or PDF pages onto print-ready A4 sheets.")
	parser.add_argument("inputs", nargs="+", help="Image files, PDF files or directories.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", required=True, help="Output PDF path.")
	output_group.add_argument("-p", "--preview", dest="preview_path", default=None, help="Output HTML preview path.")
	output_group.add_argument("--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")

	layout_group = parser.add_argument_group("Layout")
	layout_group.add_argument(
		"-m", "--mode", dest="mode", type=int, choices=SUPPORTED_MODES, default=DEFAULT_MODE,
		help="Items per page.",
	)
	layout_group.add_argument("-g", "--guides", dest="show_guides", action="store_true", help="Draw dashed cut guides.")
	layout_group.add_argument("-G", "--no-guides", dest="show_guides", action="store_false", help="Disable cut guides.")
	layout_group.add_argument("--margin", dest="margin", type=non_negative_mm, default=DEFAULT_MARGIN_MM, help="Page margin in mm.")
	layout_group.add_argument("--spacing", dest="spacing", type=non_negative_mm, default=DEFAULT_SPACING_MM, help="Cell spacing in mm.")

	parser.set_defaults(show_guides=True)

	args = parser.parse_args(argv)
	return args


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def report_import(report: ImportReport) -> None:
	"""
	Print what the import skipped.

	Args:
		report: ImportReport from the session.
	"""
	for path in report.skipped_duplicates:
		print(f"Duplicate skipped: {path.name}")
	for _path, message in report.rejected:
		print(f"Rejected: {message}")
	if report.truncated:
		print(f"File limit reached, {len(report.truncated)} file(s) not imported")
	if report.cancelled:
		print("Import cancelled")


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	session: nups.session.Session,
	report: ImportReport,
	grid: GridDescriptor,
	result: DocumentResult,
	config: RenderConfig,
) -> None:
	"""
	Write a manifest JSON file.

	Args:
		manifest_path: Output path.
		session: Session with the imported assets.
		report: Import report.
		grid: Grid descriptor.
		result: Document result.
		config: Render configuration.
	"""
	data = {
		"inputs": [str(source.path) for source in session.sources],
		"assets": [
			{
				"id": asset.asset_id,
				"source": asset.source_name,
				"width": asset.width,
				"height": asset.height,
			}
			for asset in session.assets
		],
		"skipped_duplicates": [str(path) for path in report.skipped_duplicates],
		"rejected": {str(path): message for path, message in report.rejected},
		"truncated": [str(path) for path in report.truncated],
		"layout_errors": [
			{"index": error.item_index, "id": error.asset_id, "message": error.message}
			for error in result.errors
		],
		"total_items": result.total_items,
		"placed_items": result.placed_items,
		"pages": result.pages,
		"items_per_page": result.items_per_page,
		"grid": nups.layout.summarize_grid(grid),
		"show_guides": config.show_guides,
		"output": config.output_path,
		"preview": config.preview_path,
	}
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)


#============================================
def run_pipeline(args: argparse.Namespace) -> int:
	"""
	Run the full pipeline from input files to PDF and preview.

	Args:
		args: Parsed argparse namespace.

	Returns:
		Process exit status.
	"""
	config = build_config(args)
	print("A4 N-up sheet pipeline")
	print(f"Output PDF: {config.output_path}")
	if config.preview_path:
		print(f"Preview HTML: {config.preview_path}")
	print(f"Mode: {nups.config.get_mode_spec(config.mode).label}")
	print(f"Cut guides: {config.show_guides}")
	print(f"Margin: {config.margin} mm, spacing: {config.spacing} mm")

	start_time = time.perf_counter()
	page_constants = nups.config.default_page_constants(config.margin, config.spacing)
	layout_start = time.perf_counter()
	try:
		grid = nups.layout.compute_grid(config.mode, page_constants)
	except ValueError as error:
		# degenerate cells, or a negative margin or spacing
		print(f"Layout error: {error}")
		return 2
	layout_end = time.perf_counter()
	print(
		"Grid: {}x{} cells of {:.2f} x {:.2f} mm ({})".format(
			grid.columns,
			grid.rows,
			grid.cell_width,
			grid.cell_height,
			grid.orientation,
		)
	)

	paths = nups.decode.gather_input_paths(args.inputs)
	print(f"Input files found: {len(paths)}")
	session = nups.session.Session(mode=config.mode, show_guides=config.show_guides)

	def on_progress(current: int, total: int) -> None:
		if current % PROGRESS_UPDATE_EVERY == 0 or current == total:
			print_progress("Import", current, total)

	import_start = time.perf_counter()
	if paths:
		print_progress("Import", 0, len(paths))
	report = session.add_assets(paths, on_progress=on_progress)
	import_end = time.perf_counter()
	if paths:
		print()
	report_import(report)
	print(f"Images imported: {len(session.assets)}")
	if not session.assets:
		print("Nothing to render.")
		return 1

	items = session.layout_items()
	images = session.images()
	render_start = time.perf_counter()
	output_path = pathlib.Path(config.output_path)
	try:
		result = nups.document.render_document(items, images, grid, output_path, config.show_guides)
	except ValueError as error:
		print(f"Nothing to render: {error}")
		return 1
	for error in result.errors:
		print(f"Skipped item {error.item_index + 1} ({error.asset_id}): {error.message}")
	if config.preview_path:
		pages, _errors = nups.screen.build_screen_pages(items, grid, config.show_guides)
		nups.screen.write_preview_html(
			pages,
			grid,
			images,
			pathlib.Path(config.preview_path),
			names=session.names(),
		)
		print(f"Preview written: {config.preview_path}")
	render_end = time.perf_counter()
	print(f"Pages written: {result.pages}")
	print(f"Items placed: {result.placed_items}")
	if result.skipped_items:
		print(f"Items skipped: {result.skipped_items}")

	write_manifest(pathlib.Path(config.manifest_path), session, report, grid, result, config)
	total_time = time.perf_counter() - start_time
	print(
		"Timing: layout={:.2f}s import={:.2f}s render={:.2f}s total={:.2f}s".format(
			layout_end - layout_start,
			import_end - import_start,
			render_end - render_start,
			total_time,
		)
	)
	print(f"Manifest written: {config.manifest_path}")
	return 0


#============================================
def main() -> None:
	"""
	Main entry point.
	"""
	args = parse_args()
	raise SystemExit(run_pipeline(args))
