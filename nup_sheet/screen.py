"""
Screen adapter: percentage boxes and an HTML preview.

Every page rectangle is expressed as a percentage of the page box, so the
preview scales to any window size while matching the PDF geometry.
"""

# Standard Library
import base64
import dataclasses
import io
import pathlib

# PIP3 modules
import jinja2
import PIL.Image

# local repo modules
import nup_sheet as nups
import nup_sheet.config
import nup_sheet.geometry
import nup_sheet.layout
import nup_sheet.placement


Rect = nups.geometry.Rect
GridDescriptor = nups.geometry.GridDescriptor
GuideLine = nups.geometry.GuideLine
LayoutItem = nups.geometry.LayoutItem
PlacedItem = nups.geometry.PlacedItem
ItemError = nups.geometry.ItemError

JPEG_QUALITY = nups.config.JPEG_QUALITY
PREVIEW_THUMB_MAX_PX = nups.config.PREVIEW_THUMB_MAX_PX
CELL_BACKGROUND_COLOR = nups.config.CELL_BACKGROUND_COLOR
GUIDE_LINE_COLOR = nups.config.GUIDE_LINE_COLOR
GUIDE_LINE_WIDTH_MM = nups.config.GUIDE_LINE_WIDTH_MM
TEMPLATE_DIR = pathlib.Path(__file__).resolve().parent / "templates"
PREVIEW_TEMPLATE = "preview.html.j2"


@dataclasses.dataclass(frozen=True)
class ScreenGuide:
	x0: float
	y0: float
	x1: float
	y1: float
	orientation: str


@dataclasses.dataclass(frozen=True)
class ScreenSlot:
	item_index: int
	asset_id: str
	slot_rect: Rect
	image_rect: Rect
	crop_rect: Rect | None
	fill_rect: Rect | None
	# source image box relative to image_rect, in percent
	source_box: Rect


@dataclasses.dataclass(frozen=True)
class ScreenPage:
	page_index: int
	orientation: str
	slots: list[ScreenSlot]
	guides: list[ScreenGuide]


#============================================
def to_percent_rect(rect: Rect, grid: GridDescriptor) -> Rect:
	"""
	Convert a page rectangle from mm to percent of the page box.

	Args:
		rect: Rectangle in page mm.
		grid: Grid descriptor with the page size.

	Returns:
		Rectangle in percent.
	"""
	return Rect(
		rect.x / grid.page_width * 100.0,
		rect.y / grid.page_height * 100.0,
		rect.width / grid.page_width * 100.0,
		rect.height / grid.page_height * 100.0,
	)


#============================================
def from_percent_rect(rect: Rect, grid: GridDescriptor) -> Rect:
	"""
	Convert a percent rectangle back to page mm.

	Args:
		rect: Rectangle in percent.
		grid: Grid descriptor with the page size.

	Returns:
		Rectangle in page mm.
	"""
	return Rect(
		rect.x * grid.page_width / 100.0,
		rect.y * grid.page_height / 100.0,
		rect.width * grid.page_width / 100.0,
		rect.height * grid.page_height / 100.0,
	)


#============================================
def to_percent_guide(line: GuideLine, grid: GridDescriptor) -> ScreenGuide:
	return ScreenGuide(
		line.x0 / grid.page_width * 100.0,
		line.y0 / grid.page_height * 100.0,
		line.x1 / grid.page_width * 100.0,
		line.y1 / grid.page_height * 100.0,
		line.orientation,
	)


#============================================
def compute_source_box(crop: Rect | None) -> Rect:
	"""
	Position the full source image so only the crop shows through.

	Args:
		crop: Fractional crop or None.

	Returns:
		Source box in percent of the visible image box.
	"""
	if crop is None:
		return Rect(0.0, 0.0, 100.0, 100.0)
	return Rect(
		-crop.x / crop.width * 100.0,
		-crop.y / crop.height * 100.0,
		100.0 / crop.width,
		100.0 / crop.height,
	)


#============================================
def build_screen_slot(placed: PlacedItem, grid: GridDescriptor) -> ScreenSlot:
	fill_rect = None
	if placed.plan.fill is not None:
		fill_rect = to_percent_rect(placed.plan.fill, grid)
	return ScreenSlot(
		item_index=placed.item_index,
		asset_id=placed.asset_id,
		slot_rect=to_percent_rect(placed.cell, grid),
		image_rect=to_percent_rect(placed.plan.placement, grid),
		crop_rect=placed.plan.crop,
		fill_rect=fill_rect,
		source_box=compute_source_box(placed.plan.crop),
	)


#============================================
def build_screen_page(
	page_index: int,
	placed_items: list[PlacedItem],
	grid: GridDescriptor,
	show_guides: bool,
) -> ScreenPage:
	"""
	Build the percentage layout of one page.

	Args:
		page_index: Page number, zero based.
		placed_items: Items placed on this page.
		grid: Grid descriptor.
		show_guides: Whether to include cut guides.

	Returns:
		ScreenPage.
	"""
	guides: list[ScreenGuide] = []
	if show_guides:
		guides = [to_percent_guide(line, grid) for line in nups.layout.compute_guide_lines(grid)]
	return ScreenPage(
		page_index=page_index,
		orientation=grid.orientation,
		slots=[build_screen_slot(placed, grid) for placed in placed_items],
		guides=guides,
	)


#============================================
def build_screen_pages(
	items: list[LayoutItem],
	grid: GridDescriptor,
	show_guides: bool,
) -> tuple[list[ScreenPage], list[ItemError]]:
	"""
	Build the percentage layout for every page.

	Args:
		items: Ordered layout items.
		grid: Grid descriptor.
		show_guides: Whether to include cut guides.

	Returns:
		Tuple of (screen pages, per-item errors).
	"""
	pages, errors = nups.placement.plan_items(items, grid)
	screen_pages = [
		build_screen_page(page_index, placed_items, grid, show_guides)
		for page_index, placed_items in enumerate(pages)
	]
	return (screen_pages, errors)


#============================================
def encode_data_uri(image: PIL.Image.Image) -> str:
	"""
	Encode a downscaled JPEG copy of an image as a data URI.

	Args:
		image: Pillow image.

	Returns:
		data:image/jpeg;base64 URI.
	"""
	thumb = image.convert("RGB")
	thumb.thumbnail((PREVIEW_THUMB_MAX_PX, PREVIEW_THUMB_MAX_PX))
	buffer = io.BytesIO()
	thumb.save(buffer, format="JPEG", quality=JPEG_QUALITY)
	payload = base64.b64encode(buffer.getvalue()).decode("ascii")
	return f"data:image/jpeg;base64,{payload}"


#============================================
def _get_environment() -> jinja2.Environment:
	return jinja2.Environment(
		loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
		autoescape=jinja2.select_autoescape(["html", "j2"]),
		trim_blocks=True,
		lstrip_blocks=True,
		undefined=jinja2.StrictUndefined,
	)


#============================================
def render_preview_html(
	pages: list[ScreenPage],
	grid: GridDescriptor,
	images: dict[str, PIL.Image.Image],
	names: dict[str, str] | None = None,
) -> str:
	"""
	Render the preview pages as a standalone HTML document.

	Args:
		pages: Screen pages from build_screen_pages.
		grid: Grid descriptor.
		images: Pillow images keyed by asset id.
		names: Optional display names keyed by asset id.

	Returns:
		HTML text.
	"""
	names = names or {}
	sources: dict[str, str] = {}
	for page in pages:
		for slot in page.slots:
			if slot.asset_id not in sources:
				sources[slot.asset_id] = encode_data_uri(images[slot.asset_id])
	template = _get_environment().get_template(PREVIEW_TEMPLATE)
	return template.render(
		pages=pages,
		grid=grid,
		sources=sources,
		names=names,
		background_color=CELL_BACKGROUND_COLOR,
		guide_color=GUIDE_LINE_COLOR,
		guide_width_mm=GUIDE_LINE_WIDTH_MM,
	)


#============================================
def write_preview_html(
	pages: list[ScreenPage],
	grid: GridDescriptor,
	images: dict[str, PIL.Image.Image],
	output_path: pathlib.Path,
	names: dict[str, str] | None = None,
) -> None:
	"""
	Write the HTML preview to disk.

	Args:
		pages: Screen pages.
		grid: Grid descriptor.
		images: Pillow images keyed by asset id.
		output_path: Output HTML path.
		names: Optional display names keyed by asset id.
	"""
	text = render_preview_html(pages, grid, images, names)
	output_path.write_text(text, encoding="utf-8")
