"""
Decode input files into RGB bitmaps.

Raster images are read with Pillow; for PDF inputs the first page is
rasterised with PyMuPDF.
"""

# Standard Library
import dataclasses
import pathlib

# PIP3 modules
import fitz
import PIL.Image
import PIL.ImageOps

# local repo modules
import nup_sheet as nups
import nup_sheet.config
import nup_sheet.errors


ImportRejectedError = nups.errors.ImportRejectedError

PDF_RENDER_SCALE = nups.config.PDF_RENDER_SCALE
RASTER_SUFFIXES = nups.config.RASTER_SUFFIXES
PDF_SUFFIXES = nups.config.PDF_SUFFIXES
CELL_BACKGROUND_COLOR = nups.config.CELL_BACKGROUND_COLOR


@dataclasses.dataclass(frozen=True)
class ImageAsset:
	asset_id: str
	source_name: str
	image: PIL.Image.Image
	width: int
	height: int

	@property
	def aspect_ratio(self) -> float:
		if self.height <= 0:
			return 0.0
		return self.width / self.height


#============================================
def is_supported(path: pathlib.Path) -> bool:
	suffix = path.suffix.lower()
	return suffix in RASTER_SUFFIXES or suffix in PDF_SUFFIXES


#============================================
def gather_input_paths(inputs: list[str]) -> list[pathlib.Path]:
	"""
	Gather supported files from input paths.

	Directories are expanded recursively in sorted order; files keep the
	order they were given in.

	Args:
		inputs: Input paths.

	Returns:
		List of supported file paths.
	"""
	paths: list[pathlib.Path] = []
	for entry in inputs:
		path = pathlib.Path(entry).expanduser().resolve()
		if path.is_dir():
			paths.extend(
				candidate for candidate in sorted(path.rglob("*"))
				if candidate.is_file() and is_supported(candidate)
			)
			continue
		if path.is_file() and is_supported(path):
			paths.append(path)
	return paths


#============================================
def flatten_to_rgb(image: PIL.Image.Image) -> PIL.Image.Image:
	"""
	Convert to RGB, compositing any transparency onto the cell background.

	Args:
		image: Pillow image in any mode.

	Returns:
		RGB image.
	"""
	if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
		rgba = image.convert("RGBA")
		background = PIL.Image.new("RGB", rgba.size, CELL_BACKGROUND_COLOR)
		background.paste(rgba, mask=rgba.getchannel("A"))
		return background
	return image.convert("RGB")


#============================================
def decode_raster(path: pathlib.Path) -> PIL.Image.Image:
	"""
	Read a raster image, honoring EXIF orientation.

	Args:
		path: Image path.

	Returns:
		RGB image.
	"""
	with PIL.Image.open(path) as opened:
		opened.load()
		image = PIL.ImageOps.exif_transpose(opened)
		return flatten_to_rgb(image)


#============================================
def decode_pdf_first_page(path: pathlib.Path, scale: float = PDF_RENDER_SCALE) -> PIL.Image.Image:
	"""
	Rasterise the first page of a PDF.

	Args:
		path: PDF path.
		scale: Zoom factor relative to 72 DPI.

	Returns:
		RGB image.
	"""
	document = fitz.open(path)
	try:
		if document.page_count < 1:
			raise ImportRejectedError(f"{path.name}: PDF has no pages")
		page = document[0]
		matrix = fitz.Matrix(scale, scale)
		pixmap = page.get_pixmap(matrix=matrix, alpha=False)
		image = PIL.Image.frombytes("RGB", [pixmap.width, pixmap.height], pixmap.samples)
	finally:
		document.close()
	return image


#============================================
def decode_file(path: pathlib.Path, asset_id: str) -> ImageAsset:
	"""
	Decode one input file into an ImageAsset.

	Args:
		path: Input file path.
		asset_id: Identifier assigned by the session.

	Returns:
		ImageAsset.
	"""
	suffix = path.suffix.lower()
	try:
		if suffix in RASTER_SUFFIXES:
			image = decode_raster(path)
		elif suffix in PDF_SUFFIXES:
			image = decode_pdf_first_page(path)
		else:
			raise ImportRejectedError(f"{path.name}: unsupported file type {suffix or '(none)'}")
	except ImportRejectedError:
		raise
	except (OSError, ValueError, RuntimeError) as error:
		raise ImportRejectedError(f"{path.name}: {error}") from error
	return ImageAsset(
		asset_id=asset_id,
		source_name=path.name,
		image=image,
		width=image.width,
		height=image.height,
	)
