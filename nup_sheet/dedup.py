"""
Duplicate detection for imported files.

Files match on name, size and modification time first. Only when an
incoming file has the same size as an already admitted file is a sampled
content hash computed.
"""

# Standard Library
import dataclasses
import hashlib
import pathlib


SAMPLE_SIZE = 64 * 1024


@dataclasses.dataclass(frozen=True)
class FileFingerprint:
	name: str
	size: int
	mtime: float


@dataclasses.dataclass
class _Entry:
	path: pathlib.Path
	fingerprint: FileFingerprint
	content_hash: str | None = None


#============================================
def fingerprint_file(path: pathlib.Path) -> FileFingerprint:
	"""
	Build the cheap fingerprint of a file.

	Args:
		path: File path.

	Returns:
		FileFingerprint with name, size and mtime.
	"""
	stat = path.stat()
	return FileFingerprint(name=path.name, size=stat.st_size, mtime=stat.st_mtime)


#============================================
def sample_hash(path: pathlib.Path, sample_size: int = SAMPLE_SIZE) -> str:
	"""
	Hash the head, middle and tail of a file.

	Sample digests are sorted before combining so the result does not
	depend on the order in which samples were taken.

	Args:
		path: File path.
		sample_size: Bytes per sample.

	Returns:
		Hex digest.
	"""
	size = path.stat().st_size
	if size <= sample_size * 3:
		offsets = [0]
		lengths = [size]
	else:
		offsets = [0, (size - sample_size) // 2, size - sample_size]
		lengths = [sample_size] * 3
	digests: list[bytes] = []
	with path.open("rb") as handle:
		for offset, length in zip(offsets, lengths):
			handle.seek(offset)
			digests.append(hashlib.sha256(handle.read(length)).digest())
	hasher = hashlib.sha256()
	hasher.update(str(size).encode("ascii"))
	for digest in sorted(digests):
		hasher.update(digest)
	return hasher.hexdigest()


class DuplicateIndex:
	"""
	Remembers admitted files in session order.
	"""

	def __init__(self):
		self._entries: list[_Entry] = []

	def __len__(self) -> int:
		return len(self._entries)

	def is_duplicate(self, path: pathlib.Path) -> bool:
		"""
		Check a candidate file against every admitted file.

		Args:
			path: Candidate file path.

		Returns:
			True if the file was already admitted.
		"""
		fingerprint = fingerprint_file(path)
		same_size = [entry for entry in self._entries if entry.fingerprint.size == fingerprint.size]
		if not same_size:
			return False
		for entry in same_size:
			if entry.fingerprint == fingerprint:
				return True
		candidate_hash = sample_hash(path)
		for entry in same_size:
			if entry.content_hash is None:
				entry.content_hash = sample_hash(entry.path)
			if entry.content_hash == candidate_hash:
				return True
		return False

	def add(self, path: pathlib.Path) -> None:
		self._entries.append(_Entry(path=path, fingerprint=fingerprint_file(path)))

	def remove(self, index: int) -> None:
		del self._entries[index]

	def clear(self) -> None:
		self._entries.clear()
