"""
Installed font discovery for family/style lookups.
"""

# Standard Library
import dataclasses
import io
import os
import pathlib
import struct
import sys

# PIP3 modules
import fontTools.ttLib

# local repo modules
import label_sheet_generator as lsg
import label_sheet_generator.fonts


FontStyle = lsg.fonts.FontStyle
FontHandle = lsg.fonts.FontHandle
FontNotFoundError = lsg.fonts.FontNotFoundError

FONT_SUFFIXES = {".ttf", ".otf", ".ttc", ".otc"}
COLLECTION_SUFFIXES = {".ttc", ".otc"}
NORMAL_WEIGHT = 400

# fsSelection bits
FS_ITALIC = 1 << 0
FS_OBLIQUE = 1 << 9
# head.macStyle bits
MAC_ITALIC = 1 << 1

# preferred slant order for each requested style
STYLE_PREFERENCE = {
	FontStyle.NORMAL: ("upright", "oblique", "italic"),
	FontStyle.OBLIQUE: ("oblique", "italic", "upright"),
	FontStyle.ITALIC: ("italic", "oblique", "upright"),
}


@dataclasses.dataclass(frozen=True)
class FontFace:
	family_name: str
	subfamily: str
	weight: int
	slant: str
	path: pathlib.Path | None = None
	data: bytes | None = None
	font_index: int = 0

	def handle(self) -> FontHandle:
		if self.data is not None:
			return FontHandle.from_bytes(self.data, self.font_index)
		return FontHandle.from_path(self.path, self.font_index)


#============================================
def family_key(name: str) -> str:
	"""
	Normalize a family name for comparisons.

	Args:
		name: Family name.

	Returns:
		Lowercase name with collapsed whitespace.
	"""
	return " ".join(name.strip().lower().split())


#============================================
def default_font_dirs() -> list[pathlib.Path]:
	"""
	List the usual font directories for this platform.

	Returns:
		Directory paths, existing or not.
	"""
	home = pathlib.Path.home()
	if sys.platform == "win32":
		windir = os.environ.get("WINDIR", "C:\\Windows")
		local_fonts = pathlib.Path(os.environ.get("LOCALAPPDATA", home)) / "Microsoft" / "Windows" / "Fonts"
		return [pathlib.Path(windir) / "Fonts", local_fonts]
	if sys.platform == "darwin":
		return [
			pathlib.Path("/System/Library/Fonts"),
			pathlib.Path("/Library/Fonts"),
			home / "Library" / "Fonts",
		]
	return [
		pathlib.Path("/usr/share/fonts"),
		pathlib.Path("/usr/local/share/fonts"),
		home / ".fonts",
		home / ".local" / "share" / "fonts",
	]


#============================================
def read_name(font: fontTools.ttLib.TTFont, *name_ids: int) -> str:
	"""
	Read the first available name record among several IDs.

	Args:
		font: fontTools font.
		name_ids: Name IDs in priority order.

	Returns:
		Name string, or an empty string.
	"""
	if "name" not in font:
		return ""
	table = font["name"]
	for name_id in name_ids:
		value = table.getDebugName(name_id)
		if value:
			return value.strip()
	return ""


#============================================
def describe_face(
	font: fontTools.ttLib.TTFont,
	path: pathlib.Path | None = None,
	data: bytes | None = None,
	font_index: int = 0,
) -> FontFace | None:
	"""
	Read family and style metadata from a fontTools font.

	Args:
		font: fontTools font.
		path: Source path, for on-disk faces.
		data: Source bytes, for in-memory faces.
		font_index: Index inside a collection.

	Returns:
		FontFace, or None when the font has no family name.
	"""
	family_name = read_name(font, 16, 1)
	if not family_name:
		return None
	subfamily = read_name(font, 17, 2)

	weight = NORMAL_WEIGHT
	fs_selection = 0
	if "OS/2" in font:
		os2 = font["OS/2"]
		weight = int(getattr(os2, "usWeightClass", NORMAL_WEIGHT) or NORMAL_WEIGHT)
		fs_selection = int(getattr(os2, "fsSelection", 0))
	mac_style = 0
	if "head" in font:
		mac_style = int(getattr(font["head"], "macStyle", 0))

	if fs_selection & FS_OBLIQUE or "oblique" in subfamily.lower():
		slant = "oblique"
	elif fs_selection & FS_ITALIC or mac_style & MAC_ITALIC or "italic" in subfamily.lower():
		slant = "italic"
	else:
		slant = "upright"

	return FontFace(
		family_name=family_name,
		subfamily=subfamily,
		weight=weight,
		slant=slant,
		path=path,
		data=data,
		font_index=font_index,
	)


#============================================
def scan_font_file(path: pathlib.Path) -> list[FontFace]:
	"""
	Read every face in a font file.

	Args:
		path: Font or font collection path.

	Returns:
		List of FontFace entries; empty when the file is unreadable.
	"""
	faces = []
	try:
		if path.suffix.lower() in COLLECTION_SUFFIXES:
			with fontTools.ttLib.TTCollection(str(path), lazy=True) as collection:
				for index, font in enumerate(collection.fonts):
					faces.append(describe_face(font, path=path, font_index=index))
		else:
			with fontTools.ttLib.TTFont(str(path), lazy=True) as font:
				faces.append(describe_face(font, path=path))
	except (fontTools.ttLib.TTLibError, OSError, KeyError, ValueError, AssertionError, struct.error):
		# unreadable or truncated font files are skipped
		return []
	return [face for face in faces if face is not None]


class SystemFontCatalogue(lsg.fonts.FontCatalogue):
	"""
	Catalogue of font faces found in font directories.

	Directories are scanned once, on the first lookup.
	"""

	def __init__(
		self,
		font_dirs: list[pathlib.Path] | None = None,
		faces: list[FontFace] | None = None,
	) -> None:
		if font_dirs is None:
			font_dirs = default_font_dirs()
		self.font_dirs = [pathlib.Path(font_dir) for font_dir in font_dirs]
		self._faces: dict[str, list[FontFace]] | None = None
		self._extra_faces: list[FontFace] = list(faces or [])

	def _scan(self) -> dict[str, list[FontFace]]:
		faces: dict[str, list[FontFace]] = {}
		for font_dir in self.font_dirs:
			if not font_dir.is_dir():
				continue
			for path in sorted(font_dir.rglob("*")):
				if path.suffix.lower() not in FONT_SUFFIXES or not path.is_file():
					continue
				for face in scan_font_file(path):
					faces.setdefault(family_key(face.family_name), []).append(face)
		for face in self._extra_faces:
			faces.setdefault(family_key(face.family_name), []).append(face)
		return faces

	@property
	def faces(self) -> dict[str, list[FontFace]]:
		if self._faces is None:
			self._faces = self._scan()
		return self._faces

	def add_face(self, data: bytes, font_index: int = 0) -> FontFace:
		"""
		Register an in-memory font with the catalogue.

		Args:
			data: Font file bytes.
			font_index: Index inside a collection.

		Returns:
			The added FontFace.
		"""
		try:
			if data[:4] == b"ttcf":
				font = fontTools.ttLib.TTFont(io.BytesIO(data), fontNumber=font_index)
			else:
				font = fontTools.ttLib.TTFont(io.BytesIO(data))
		except (fontTools.ttLib.TTLibError, struct.error) as exc:
			raise lsg.fonts.FontLoadError(f"Unreadable font data: {exc}") from exc
		face = describe_face(font, data=bytes(data), font_index=font_index)
		if face is None:
			raise lsg.fonts.FontLoadError("Font data has no family name")
		self._extra_faces.append(face)
		if self._faces is not None:
			self._faces.setdefault(family_key(face.family_name), []).append(face)
		return face

	def families(self) -> list[str]:
		names = {faces[0].family_name for faces in self.faces.values() if faces}
		return sorted(names)

	def select_best_match(self, family_name: str, style: FontStyle) -> FontHandle:
		candidates = self.faces.get(family_key(family_name))
		if not candidates:
			raise FontNotFoundError(f"Font family '{family_name}' not found")
		preference = STYLE_PREFERENCE[style]

		def rank(face: FontFace) -> tuple:
			return (
				preference.index(face.slant),
				abs(face.weight - NORMAL_WEIGHT),
				face.weight,
				str(face.path or ""),
				face.font_index,
			)

		best = min(candidates, key=rank)
		return best.handle()
