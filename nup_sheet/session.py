"""
Session state: imported assets, current mode and guide toggle.

The session is an explicit value. It changes only through add_assets(),
remove_asset(), reset() and the two setters.
"""

# Standard Library
import dataclasses
import pathlib
from collections.abc import Callable

# PIP3 modules
import PIL.Image

# local repo modules
import nup_sheet as nups
import nup_sheet.config
import nup_sheet.decode
import nup_sheet.dedup
import nup_sheet.errors
import nup_sheet.geometry
import nup_sheet.layout


ImageAsset = nups.decode.ImageAsset
LayoutItem = nups.geometry.LayoutItem
GridDescriptor = nups.geometry.GridDescriptor
PageConstants = nups.config.PageConstants
ImportRejectedError = nups.errors.ImportRejectedError

DEFAULT_MODE = nups.config.DEFAULT_MODE
MAX_FILES = nups.config.MAX_FILES


@dataclasses.dataclass(frozen=True)
class SourceFile:
	path: pathlib.Path
	name: str
	size: int
	mtime: float


@dataclasses.dataclass
class ImportReport:
	added: list[ImageAsset] = dataclasses.field(default_factory=list)
	skipped_duplicates: list[pathlib.Path] = dataclasses.field(default_factory=list)
	rejected: list[tuple[pathlib.Path, str]] = dataclasses.field(default_factory=list)
	truncated: list[pathlib.Path] = dataclasses.field(default_factory=list)
	cancelled: bool = False


class Session:
	"""
	Ordered assets plus the settings the layout core reads.
	"""

	def __init__(self, mode: int = DEFAULT_MODE, show_guides: bool = True, max_files: int = MAX_FILES):
		nups.config.get_mode_spec(mode)
		self.mode = mode
		self.show_guides = show_guides
		self.max_files = max_files
		self.processing = False
		self.assets: list[ImageAsset] = []
		self.sources: list[SourceFile] = []
		self._duplicates = nups.dedup.DuplicateIndex()
		self._next_id = 1

	@property
	def policy(self) -> str:
		return nups.config.get_mode_spec(self.mode).policy

	def set_mode(self, mode: int) -> None:
		nups.config.get_mode_spec(mode)
		self.mode = mode

	def toggle_guides(self) -> bool:
		self.show_guides = not self.show_guides
		return self.show_guides

	def _new_asset_id(self) -> str:
		asset_id = f"asset-{self._next_id:04d}"
		self._next_id += 1
		return asset_id

	def add_assets(
		self,
		paths: list[pathlib.Path],
		should_cancel: Callable[[], bool] | None = None,
		on_progress: Callable[[int, int], None] | None = None,
	) -> ImportReport:
		"""
		Import files in order, skipping duplicates and undecodable files.

		Once max_files assets are held, the remaining paths are reported
		as truncated. Skipped duplicates and rejected files do not use up
		the limit.

		Args:
			paths: Candidate file paths.
			should_cancel: Optional callback checked before each file.
			on_progress: Optional callback receiving (done, total).

		Returns:
			ImportReport.
		"""
		if self.processing:
			raise RuntimeError("An import is already in progress")
		report = ImportReport()
		paths = [pathlib.Path(path) for path in paths]

		self.processing = True
		try:
			total = len(paths)
			for index, path in enumerate(paths, start=1):
				if should_cancel is not None and should_cancel():
					report.cancelled = True
					break
				if len(self.assets) >= self.max_files:
					# duplicates do not count against the limit
					report.truncated = paths[index - 1:]
					break
				self._import_one(path, report)
				if on_progress is not None:
					on_progress(index, total)
		finally:
			self.processing = False
		return report

	def _import_one(self, path: pathlib.Path, report: ImportReport) -> None:
		try:
			if self._duplicates.is_duplicate(path):
				report.skipped_duplicates.append(path)
				return
			asset = nups.decode.decode_file(path, self._new_asset_id())
			stat = path.stat()
		except ImportRejectedError as error:
			report.rejected.append((path, str(error)))
			return
		except OSError as error:
			report.rejected.append((path, f"{path.name}: {error.strerror or error}"))
			return
		self.assets.append(asset)
		self.sources.append(SourceFile(path, path.name, stat.st_size, stat.st_mtime))
		self._duplicates.add(path)
		report.added.append(asset)

	def remove_asset(self, index: int) -> ImageAsset:
		"""
		Remove the asset at index; later assets move up one position.

		Args:
			index: Zero-based position.

		Returns:
			The removed asset.
		"""
		if index < 0 or index >= len(self.assets):
			raise IndexError(f"Asset index {index} out of range (0..{len(self.assets) - 1})")
		asset = self.assets.pop(index)
		self.sources.pop(index)
		self._duplicates.remove(index)
		return asset

	def reset(self) -> None:
		self.assets.clear()
		self.sources.clear()
		self._duplicates.clear()
		self.processing = False
		self.mode = DEFAULT_MODE
		self.show_guides = True

	def layout_items(self) -> list[LayoutItem]:
		return [LayoutItem(asset.asset_id, asset.aspect_ratio) for asset in self.assets]

	def images(self) -> dict[str, PIL.Image.Image]:
		return {asset.asset_id: asset.image for asset in self.assets}

	def names(self) -> dict[str, str]:
		return {asset.asset_id: asset.source_name for asset in self.assets}

	def grid(self, page_constants: PageConstants) -> GridDescriptor:
		return nups.layout.compute_grid(self.mode, page_constants)
