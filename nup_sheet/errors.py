"""
Exception types raised by the layout core and the import pipeline.
"""


class NupSheetError(Exception):
	"""
	Base class for all nup_sheet errors.
	"""


class DegenerateLayoutError(NupSheetError, ValueError):
	"""
	Margin or spacing leaves no positive cell size for the requested mode.
	"""

	def __init__(self, mode: int, cell_width: float, cell_height: float):
		self.mode = mode
		self.cell_width = cell_width
		self.cell_height = cell_height
		super().__init__(
			f"Mode {mode} leaves a degenerate cell "
			f"({cell_width:.3f} x {cell_height:.3f} mm)"
		)


class InvalidAspectRatioError(NupSheetError, ValueError):
	"""
	Image aspect ratio is zero, negative or not finite.
	"""


class InvariantViolation(NupSheetError, AssertionError):
	"""
	A computed rectangle is empty or negative. Programming defect.
	"""


class ImportRejectedError(NupSheetError):
	"""
	An input file could not be decoded into an image.
	"""
