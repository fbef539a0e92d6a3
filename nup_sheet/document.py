"""
Document adapter: draw commands and PDF output.

Commands are built in page mm with a top-left origin; only the reportlab
executor flips to the PDF bottom-left origin and converts to points.
"""

# Standard Library
import dataclasses
import pathlib

# PIP3 modules
import PIL.Image
import reportlab.lib.utils
import reportlab.pdfgen.canvas

# local repo modules
import nup_sheet as nups
import nup_sheet.config
import nup_sheet.fit
import nup_sheet.geometry
import nup_sheet.layout
import nup_sheet.placement


Rect = nups.geometry.Rect
GridDescriptor = nups.geometry.GridDescriptor
LayoutItem = nups.geometry.LayoutItem
PlacedItem = nups.geometry.PlacedItem
ItemError = nups.geometry.ItemError
mm_to_points = nups.config.mm_to_points

CELL_BACKGROUND_COLOR = nups.config.CELL_BACKGROUND_COLOR
GUIDE_LINE_COLOR = nups.config.GUIDE_LINE_COLOR
GUIDE_LINE_WIDTH_MM = nups.config.GUIDE_LINE_WIDTH_MM
GUIDE_DASH_MM = nups.config.GUIDE_DASH_MM


@dataclasses.dataclass(frozen=True)
class DrawImage:
	item_index: int
	asset_id: str
	rect: Rect
	crop: Rect | None


@dataclasses.dataclass(frozen=True)
class FillRect:
	rect: Rect
	color: str


@dataclasses.dataclass(frozen=True)
class StrokeDashedLine:
	x0: float
	y0: float
	x1: float
	y1: float
	color: str
	width: float
	dash: tuple[float, float]


@dataclasses.dataclass
class DocumentResult:
	total_items: int
	placed_items: int
	skipped_items: int
	pages: int
	items_per_page: int
	errors: list[ItemError] = dataclasses.field(default_factory=list)


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
def build_page_commands(
	placed_items: list[PlacedItem],
	grid: GridDescriptor,
	show_guides: bool,
) -> list:
	"""
	Build the draw commands for one page.

	Args:
		placed_items: Items placed on the page.
		grid: Grid descriptor.
		show_guides: Whether to add dashed cut guides.

	Returns:
		List of DrawImage, FillRect and StrokeDashedLine commands.
	"""
	commands: list = []
	for placed in placed_items:
		commands.append(
			DrawImage(
				item_index=placed.item_index,
				asset_id=placed.asset_id,
				rect=placed.plan.placement,
				crop=placed.plan.crop,
			)
		)
		if placed.plan.fill is not None:
			commands.append(FillRect(placed.plan.fill, CELL_BACKGROUND_COLOR))
	if show_guides:
		for line in nups.layout.compute_guide_lines(grid):
			commands.append(
				StrokeDashedLine(
					line.x0,
					line.y0,
					line.x1,
					line.y1,
					GUIDE_LINE_COLOR,
					GUIDE_LINE_WIDTH_MM,
					GUIDE_DASH_MM,
				)
			)
	return commands


#============================================
def build_document_commands(
	items: list[LayoutItem],
	grid: GridDescriptor,
	show_guides: bool,
) -> tuple[list[list], list[ItemError]]:
	"""
	Build draw commands for every page.

	Args:
		items: Ordered layout items.
		grid: Grid descriptor.
		show_guides: Whether to add dashed cut guides.

	Returns:
		Tuple of (commands per page, per-item errors).
	"""
	pages, errors = nups.placement.plan_items(items, grid)
	page_commands = [build_page_commands(placed_items, grid, show_guides) for placed_items in pages]
	return (page_commands, errors)


#============================================
def precrop_image(image: PIL.Image.Image, crop: Rect | None) -> PIL.Image.Image:
	"""
	Cut the drawn region out of the source bitmap.

	reportlab draws whole images only, so source cropping happens here.

	Args:
		image: Source image.
		crop: Fractional crop or None.

	Returns:
		Cropped image, or the original when there is no crop.
	"""
	if crop is None:
		return image
	box = nups.fit.crop_box_pixels(crop, image.width, image.height)
	return image.crop(box)


#============================================
def execute_commands(
	pdf: reportlab.pdfgen.canvas.Canvas,
	commands: list,
	grid: GridDescriptor,
	images: dict[str, PIL.Image.Image],
) -> None:
	"""
	Draw one page of commands onto the canvas.

	Args:
		pdf: ReportLab canvas.
		commands: Commands for the page.
		grid: Grid descriptor with the page size.
		images: Pillow images keyed by asset id.
	"""
	page_height = grid.page_height
	for command in commands:
		if isinstance(command, DrawImage):
			bitmap = precrop_image(images[command.asset_id], command.crop)
			rect = command.rect
			pdf.drawImage(
				reportlab.lib.utils.ImageReader(bitmap),
				mm_to_points(rect.x),
				mm_to_points(page_height - rect.bottom),
				width=mm_to_points(rect.width),
				height=mm_to_points(rect.height),
				mask=None,
				preserveAspectRatio=False,
				anchor="sw",
			)
		elif isinstance(command, FillRect):
			rect = command.rect
			color = parse_hex_color(command.color)
			pdf.setFillColorRGB(color[0], color[1], color[2])
			pdf.rect(
				mm_to_points(rect.x),
				mm_to_points(page_height - rect.bottom),
				mm_to_points(rect.width),
				mm_to_points(rect.height),
				stroke=0,
				fill=1,
			)
		elif isinstance(command, StrokeDashedLine):
			color = parse_hex_color(command.color)
			pdf.setStrokeColorRGB(color[0], color[1], color[2])
			pdf.setLineWidth(mm_to_points(command.width))
			pdf.setDash([mm_to_points(command.dash[0]), mm_to_points(command.dash[1])], 0)
			pdf.line(
				mm_to_points(command.x0),
				mm_to_points(page_height - command.y0),
				mm_to_points(command.x1),
				mm_to_points(page_height - command.y1),
			)
			pdf.setDash([], 0)
		else:
			raise TypeError(f"Unknown draw command {command!r}")


#============================================
def render_document(
	items: list[LayoutItem],
	images: dict[str, PIL.Image.Image],
	grid: GridDescriptor,
	output_path: pathlib.Path,
	show_guides: bool,
) -> DocumentResult:
	"""
	Render the tiled document to a PDF.

	Args:
		items: Ordered layout items.
		images: Pillow images keyed by asset id.
		grid: Grid descriptor.
		output_path: Output PDF path.
		show_guides: Whether to draw dashed cut guides.

	Returns:
		DocumentResult.
	"""
	if not items:
		raise ValueError("No items to render")
	page_commands, errors = build_document_commands(items, grid, show_guides)
	if not page_commands:
		raise ValueError(f"None of the {len(items)} items could be placed")
	page_size = (mm_to_points(grid.page_width), mm_to_points(grid.page_height))
	pdf = reportlab.pdfgen.canvas.Canvas(str(output_path), pagesize=page_size)
	pdf.setTitle(f"{grid.mode}-up sheet")
	for commands in page_commands:
		execute_commands(pdf, commands, grid, images)
		pdf.showPage()
	pdf.save()

	result = DocumentResult(
		total_items=len(items),
		placed_items=len(items) - len(errors),
		skipped_items=len(errors),
		pages=len(page_commands),
		items_per_page=grid.items_per_page,
		errors=errors,
	)
	return result
