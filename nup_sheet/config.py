"""
Shared configuration and constants.

All layout math happens in millimeters with a top-left page origin.
"""

import dataclasses


MM_PER_INCH = 25.4
POINTS_PER_INCH = 72.0

A4_WIDTH_MM = 210.0
A4_HEIGHT_MM = 297.0

DEFAULT_MARGIN_MM = 4.3
DEFAULT_SPACING_MM = 4.3
DEFAULT_MODE = 9
MAX_FILES = 50

PDF_RENDER_SCALE = 2.5
JPEG_QUALITY = 85
PREVIEW_THUMB_MAX_PX = 1200

ORIENTATION_PORTRAIT = "portrait"
ORIENTATION_LANDSCAPE = "landscape"

FIT_CONTAIN = "CONTAIN"
FIT_COVER_TOP_CROP = "COVER_TOP_CROP"

CELL_BACKGROUND_COLOR = "#FFFFFF"
GUIDE_LINE_COLOR = "#AAAAAA"
GUIDE_LINE_WIDTH_MM = 0.3
GUIDE_DASH_MM = (3.0, 3.0)

GEOMETRY_EPSILON = 1e-6
PROGRESS_BAR_WIDTH = 20
PROGRESS_UPDATE_EVERY = 5

RASTER_SUFFIXES = (".jpg", ".jpeg", ".png", ".webp")
PDF_SUFFIXES = (".pdf",)


@dataclasses.dataclass(frozen=True)
class ModeSpec:
	columns: int
	rows: int
	orientation: str
	policy: str
	label: str


# mode -> fixed grid, orientation and fit policy
MODE_TABLE = {
	2: ModeSpec(1, 2, ORIENTATION_PORTRAIT, FIT_CONTAIN, "2-up portrait"),
	4: ModeSpec(2, 2, ORIENTATION_LANDSCAPE, FIT_CONTAIN, "4-up landscape"),
	6: ModeSpec(3, 2, ORIENTATION_PORTRAIT, FIT_COVER_TOP_CROP, "6-up portrait"),
	9: ModeSpec(3, 3, ORIENTATION_PORTRAIT, FIT_COVER_TOP_CROP, "9-up portrait"),
	12: ModeSpec(6, 2, ORIENTATION_LANDSCAPE, FIT_CONTAIN, "12-up landscape"),
}
SUPPORTED_MODES = tuple(sorted(MODE_TABLE))


@dataclasses.dataclass(frozen=True)
class PageConstants:
	"""
	Portrait page size plus the uniform margin and inter-cell spacing, in mm.
	"""
	page_width: float
	page_height: float
	margin: float
	spacing: float


@dataclasses.dataclass
class RenderConfig:
	mode: int
	show_guides: bool
	margin: float
	spacing: float
	output_path: str
	preview_path: str | None
	manifest_path: str | None


#============================================
def default_page_constants(
	margin: float = DEFAULT_MARGIN_MM,
	spacing: float = DEFAULT_SPACING_MM,
) -> PageConstants:
	"""
	Build A4 page constants.

	Args:
		margin: Page margin in mm.
		spacing: Inter-cell spacing in mm.

	Returns:
		PageConstants for a portrait A4 sheet.
	"""
	return PageConstants(
		page_width=A4_WIDTH_MM,
		page_height=A4_HEIGHT_MM,
		margin=margin,
		spacing=spacing,
	)


#============================================
def get_mode_spec(mode: int) -> ModeSpec:
	"""
	Look up the fixed grid for a tiling mode.

	Args:
		mode: Items per page.

	Returns:
		ModeSpec for the mode.
	"""
	spec = MODE_TABLE.get(mode)
	if spec is None:
		supported = ", ".join(str(value) for value in SUPPORTED_MODES)
		raise ValueError(f"Unsupported mode {mode!r} (supported: {supported})")
	return spec


#============================================
def mm_to_points(value: float) -> float:
	"""
	Convert millimeters to points.

	Args:
		value: Millimeters value.

	Returns:
		Points value.
	"""
	return value / MM_PER_INCH * POINTS_PER_INCH
