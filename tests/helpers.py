"""
Shared builders for tests.
"""

# Standard Library
import pathlib

# PIP3 modules
import PIL.Image

# local repo modules
import nup_sheet as nups
import nup_sheet.config
import nup_sheet.geometry
import nup_sheet.layout


#============================================
def build_grid(mode: int, margin: float = 4.3, spacing: float = 4.3) -> nups.geometry.GridDescriptor:
	"""
	Build a grid on A4 with the given margin and spacing.

	Args:
		mode: Tiling mode.
		margin: Margin in mm.
		spacing: Spacing in mm.

	Returns:
		GridDescriptor.
	"""
	constants = nups.config.default_page_constants(margin, spacing)
	return nups.layout.compute_grid(mode, constants)


#============================================
def write_image(
	directory: pathlib.Path,
	name: str,
	size: tuple[int, int],
	color: str = "red",
) -> pathlib.Path:
	"""
	Write a solid-color image file.

	Args:
		directory: Output directory.
		name: File name, suffix selects the format.
		size: (width, height) in pixels.
		color: Fill color.

	Returns:
		Written path.
	"""
	path = directory / name
	PIL.Image.new("RGB", size, color).save(path)
	return path


#============================================
def write_two_tone_image(
	directory: pathlib.Path,
	name: str,
	size: tuple[int, int],
	top_color: str,
	bottom_color: str,
) -> pathlib.Path:
	"""
	Write an image whose top half and bottom half differ in color.

	Args:
		directory: Output directory.
		name: File name.
		size: (width, height) in pixels.
		top_color: Color of the upper half.
		bottom_color: Color of the lower half.

	Returns:
		Written path.
	"""
	width, height = size
	image = PIL.Image.new("RGB", size, bottom_color)
	image.paste(PIL.Image.new("RGB", (width, height // 2), top_color), (0, 0))
	path = directory / name
	image.save(path)
	return path
