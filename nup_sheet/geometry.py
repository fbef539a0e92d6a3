"""
Value types for rectangles, pages, grids and fit plans.

Rectangles are (x, y, width, height) in millimeters with a top-left origin,
y growing downward. Renderers that use another origin convert at the edge.
"""

# Standard Library
import dataclasses
import math

# local repo modules
import nup_sheet as nups
import nup_sheet.config
import nup_sheet.errors


ORIENTATION_PORTRAIT = nups.config.ORIENTATION_PORTRAIT
ORIENTATION_LANDSCAPE = nups.config.ORIENTATION_LANDSCAPE
GEOMETRY_EPSILON = nups.config.GEOMETRY_EPSILON
InvariantViolation = nups.errors.InvariantViolation


@dataclasses.dataclass(frozen=True)
class Rect:
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

	def translate(self, dx: float, dy: float) -> "Rect":
		return Rect(self.x + dx, self.y + dy, self.width, self.height)

	def is_positive(self) -> bool:
		return self.width > 0.0 and self.height > 0.0

	def contains(self, other: "Rect", epsilon: float = GEOMETRY_EPSILON) -> bool:
		"""
		Check whether another rectangle lies inside this one.

		Args:
			other: Candidate inner rectangle.
			epsilon: Tolerance for edges that touch.

		Returns:
			True if other is within this rectangle.
		"""
		return (
			other.x >= self.x - epsilon
			and other.y >= self.y - epsilon
			and other.right <= self.right + epsilon
			and other.bottom <= self.bottom + epsilon
		)

	def intersects(self, other: "Rect", epsilon: float = GEOMETRY_EPSILON) -> bool:
		"""
		Check whether two rectangles overlap by more than epsilon.

		Args:
			other: Second rectangle.
			epsilon: Overlap tolerance.

		Returns:
			True if the rectangles overlap.
		"""
		left = max(self.x, other.x)
		right = min(self.right, other.right)
		top = max(self.y, other.y)
		bottom = min(self.bottom, other.bottom)
		return right - left > epsilon and bottom - top > epsilon

	def isclose(self, other: "Rect", tolerance: float = GEOMETRY_EPSILON) -> bool:
		return all(
			math.isclose(a, b, rel_tol=0.0, abs_tol=tolerance)
			for a, b in zip(self.as_tuple(), other.as_tuple())
		)

	def as_tuple(self) -> tuple[float, float, float, float]:
		return (self.x, self.y, self.width, self.height)


@dataclasses.dataclass(frozen=True)
class PageSpec:
	width: float
	height: float
	orientation: str

	def for_orientation(self, orientation: str) -> "PageSpec":
		"""
		Return the page turned to the requested orientation.

		Args:
			orientation: Target orientation.

		Returns:
			PageSpec whose long edge matches the orientation.
		"""
		short_edge = min(self.width, self.height)
		long_edge = max(self.width, self.height)
		if orientation == ORIENTATION_LANDSCAPE:
			return PageSpec(long_edge, short_edge, ORIENTATION_LANDSCAPE)
		if orientation == ORIENTATION_PORTRAIT:
			return PageSpec(short_edge, long_edge, ORIENTATION_PORTRAIT)
		raise ValueError(f"Unknown orientation {orientation!r}")


@dataclasses.dataclass(frozen=True)
class GridDescriptor:
	mode: int
	columns: int
	rows: int
	cell_width: float
	cell_height: float
	margin: float
	spacing: float
	page: PageSpec
	policy: str

	@property
	def items_per_page(self) -> int:
		return self.columns * self.rows

	@property
	def page_width(self) -> float:
		return self.page.width

	@property
	def page_height(self) -> float:
		return self.page.height

	@property
	def orientation(self) -> str:
		return self.page.orientation


@dataclasses.dataclass(frozen=True)
class Slot:
	item_index: int
	page_index: int
	slot_index: int
	row: int
	column: int


@dataclasses.dataclass(frozen=True)
class FitPlan:
	"""
	Resolved drawing instruction for one image in one cell.

	placement and fill are in cell-local mm (or page mm once placed);
	crop is a fraction of the source image, (0, 0, 1, 1) being the
	whole image.
	"""
	placement: Rect
	crop: Rect | None = None
	fill: Rect | None = None


@dataclasses.dataclass(frozen=True)
class GuideLine:
	x0: float
	y0: float
	x1: float
	y1: float
	orientation: str


@dataclasses.dataclass(frozen=True)
class LayoutItem:
	asset_id: str
	aspect_ratio: float


@dataclasses.dataclass(frozen=True)
class PlacedItem:
	item_index: int
	asset_id: str
	slot: Slot
	cell: Rect
	plan: FitPlan


@dataclasses.dataclass(frozen=True)
class ItemError:
	item_index: int
	asset_id: str
	message: str


#============================================
def require_positive(rect: Rect, what: str) -> Rect:
	"""
	Fail loudly on an empty or negative rectangle.

	Args:
		rect: Rectangle to check.
		what: Description used in the error message.

	Returns:
		The same rectangle.
	"""
	if not rect.is_positive():
		raise InvariantViolation(
			f"{what} is not positive: {rect.width!r} x {rect.height!r}"
		)
	return rect
