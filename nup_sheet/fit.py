"""
Aspect-ratio aware fit and crop decisions for one image in one cell.
"""

# Standard Library
import math

# local repo modules
import nup_sheet as nups
import nup_sheet.config
import nup_sheet.errors
import nup_sheet.geometry


Rect = nups.geometry.Rect
FitPlan = nups.geometry.FitPlan
InvalidAspectRatioError = nups.errors.InvalidAspectRatioError
InvariantViolation = nups.errors.InvariantViolation
require_positive = nups.geometry.require_positive

FIT_CONTAIN = nups.config.FIT_CONTAIN
FIT_COVER_TOP_CROP = nups.config.FIT_COVER_TOP_CROP
GEOMETRY_EPSILON = nups.config.GEOMETRY_EPSILON


#============================================
def check_aspect_ratio(aspect_ratio: float) -> float:
	"""
	Validate an image aspect ratio (width / height).

	Args:
		aspect_ratio: Candidate ratio.

	Returns:
		The ratio as a float.
	"""
	try:
		value = float(aspect_ratio)
	except (TypeError, ValueError) as error:
		raise InvalidAspectRatioError(f"Aspect ratio {aspect_ratio!r} is not a number") from error
	if not math.isfinite(value) or value <= 0.0:
		raise InvalidAspectRatioError(f"Aspect ratio must be positive and finite, got {aspect_ratio!r}")
	return value


#============================================
def resolve_contain(aspect_ratio: float, cell_width: float, cell_height: float) -> FitPlan:
	"""
	Uniform scale that shows the whole image, letterboxed in the cell.
	"""
	draw_width = cell_width
	draw_height = cell_width / aspect_ratio
	if draw_height > cell_height:
		draw_height = cell_height
		draw_width = cell_height * aspect_ratio
		offset_x = (cell_width - draw_width) / 2.0
		offset_y = 0.0
	else:
		offset_x = 0.0
		offset_y = (cell_height - draw_height) / 2.0
	placement = Rect(offset_x, offset_y, draw_width, draw_height)
	return FitPlan(placement=require_positive(placement, "contain placement"))


#============================================
def resolve_cover_top_crop(aspect_ratio: float, cell_width: float, cell_height: float) -> FitPlan:
	"""
	Fill the cell width, anchor at the top and crop or pad the bottom.

	Args:
		aspect_ratio: Image width / height.
		cell_width: Cell width in mm.
		cell_height: Cell height in mm.

	Returns:
		FitPlan whose placement plus fill covers the whole cell.
	"""
	draw_width = cell_width
	draw_height = cell_width / aspect_ratio
	if draw_height <= cell_height:
		placement = Rect(0.0, 0.0, draw_width, draw_height)
		fill = None
		strip = cell_height - draw_height
		if strip > GEOMETRY_EPSILON:
			fill = require_positive(Rect(0.0, draw_height, cell_width, strip), "blank fill")
		return FitPlan(placement=require_positive(placement, "cover placement"), fill=fill)

	crop_ratio = cell_height / draw_height
	crop = Rect(0.0, 0.0, 1.0, crop_ratio)
	placement = Rect(0.0, 0.0, cell_width, cell_height)
	return FitPlan(
		placement=require_positive(placement, "cover placement"),
		crop=require_positive(crop, "source crop"),
	)


#============================================
def resolve_fit(
	aspect_ratio: float,
	cell_width: float,
	cell_height: float,
	policy: str,
) -> FitPlan:
	"""
	Resolve how an image is drawn inside a cell.

	Args:
		aspect_ratio: Image width / height.
		cell_width: Cell width in mm.
		cell_height: Cell height in mm.
		policy: FIT_CONTAIN or FIT_COVER_TOP_CROP.

	Returns:
		FitPlan in cell-local mm.
	"""
	ratio = check_aspect_ratio(aspect_ratio)
	if not (cell_width > 0.0 and cell_height > 0.0):
		# a degenerate grid should never get this far
		raise InvariantViolation(f"Cell is not positive: {cell_width!r} x {cell_height!r}")
	if policy == FIT_CONTAIN:
		return resolve_contain(ratio, cell_width, cell_height)
	if policy == FIT_COVER_TOP_CROP:
		return resolve_cover_top_crop(ratio, cell_width, cell_height)
	raise ValueError(f"Unknown fit policy {policy!r}")


#============================================
def place_in_cell(plan: FitPlan, cell: Rect) -> FitPlan:
	"""
	Translate a cell-local plan onto the page.

	Args:
		plan: Cell-local FitPlan.
		cell: Absolute cell rectangle.

	Returns:
		FitPlan with placement and fill in page mm. The crop is unchanged.
	"""
	fill = None
	if plan.fill is not None:
		fill = plan.fill.translate(cell.x, cell.y)
	return FitPlan(
		placement=plan.placement.translate(cell.x, cell.y),
		crop=plan.crop,
		fill=fill,
	)


#============================================
def crop_box_pixels(crop: Rect, width: int, height: int) -> tuple[int, int, int, int]:
	"""
	Convert a fractional crop into a Pillow crop box.

	Args:
		crop: Crop as fractions of the source image.
		width: Source width in pixels.
		height: Source height in pixels.

	Returns:
		Box (left, top, right, bottom), at least one pixel in each direction.
	"""
	left = int(round(crop.x * width))
	top = int(round(crop.y * height))
	right = int(round(crop.right * width))
	bottom = int(round(crop.bottom * height))
	left = min(max(left, 0), width - 1)
	top = min(max(top, 0), height - 1)
	right = min(max(right, left + 1), width)
	bottom = min(max(bottom, top + 1), height)
	return (left, top, right, bottom)
