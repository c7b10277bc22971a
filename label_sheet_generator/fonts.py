"""
Font family resolution with style fallback.
"""

# Standard Library
import abc
import dataclasses
import enum
import hashlib
import io
import pathlib
import re
import struct

# PIP3 modules
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfbase.ttfonts


TTFont = reportlab.pdfbase.ttfonts.TTFont


class FontError(Exception):
	"""
	Base class for font resolution failures.
	"""


class FontNotFoundError(FontError):
	"""
	The catalogue has no face for a family and style.
	"""


class FontLoadError(FontError):
	"""
	Font data could not be read or parsed.
	"""


class NoRegularFontError(FontError):
	"""
	No usable regular face exists for the requested family.
	"""


class FontStyle(enum.Enum):
	NORMAL = "normal"
	OBLIQUE = "oblique"
	ITALIC = "italic"


# query order; NORMAL must come first
QUERY_STYLES = (FontStyle.NORMAL, FontStyle.OBLIQUE, FontStyle.ITALIC)


@dataclasses.dataclass(frozen=True)
class FontHandle:
	"""
	Reference to one font face, on disk or in memory.
	"""
	path: pathlib.Path | None = None
	data: bytes | None = None
	font_index: int = 0

	def __post_init__(self) -> None:
		if (self.path is None) == (self.data is None):
			raise ValueError("FontHandle needs exactly one of path or data")
		if self.font_index < 0:
			raise ValueError(f"font_index must not be negative, got {self.font_index}")

	@classmethod
	def from_path(cls, path: str | pathlib.Path, font_index: int = 0) -> "FontHandle":
		return cls(path=pathlib.Path(path), font_index=font_index)

	@classmethod
	def from_bytes(cls, data: bytes, font_index: int = 0) -> "FontHandle":
		return cls(data=bytes(data), font_index=font_index)

	def digest(self) -> str:
		"""
		Short stable identifier of the face source and index.
		"""
		hasher = hashlib.sha1()
		if self.path is not None:
			hasher.update(str(self.path).encode("utf-8"))
		else:
			hasher.update(self.data)
		hasher.update(str(self.font_index).encode("ascii"))
		return hasher.hexdigest()[:8]

	def describe(self) -> str:
		if self.path is not None:
			source = str(self.path)
		else:
			source = f"<{len(self.data)} bytes in memory>"
		if self.font_index:
			return f"{source}#{self.font_index}"
		return source


class FontCatalogue(abc.ABC):
	"""
	Source of installed fonts, queried by family name and style.
	"""

	@abc.abstractmethod
	def select_best_match(self, family_name: str, style: FontStyle) -> FontHandle:
		"""
		Return the closest face for a family and style.

		Raises:
			FontNotFoundError: When the family is unknown.
		"""


@dataclasses.dataclass(frozen=True)
class ResolvedFontFamily:
	"""
	Four loaded fonts covering regular, bold, italic and bold italic text.
	"""
	family_name: str
	regular: TTFont
	bold: TTFont
	italic: TTFont
	bold_italic: TTFont

	def font_names(self) -> dict[str, str]:
		return {
			"regular": self.regular.fontName,
			"bold": self.bold.fontName,
			"italic": self.italic.fontName,
			"bold_italic": self.bold_italic.fontName,
		}

	def register(self) -> str:
		"""
		Register the fonts and family mapping with ReportLab.

		Returns:
			Registered family name, usable with setFont and paragraph markup.
		"""
		registered = set(reportlab.pdfbase.pdfmetrics.getRegisteredFontNames())
		for font in (self.regular, self.bold, self.italic, self.bold_italic):
			if font.fontName not in registered:
				reportlab.pdfbase.pdfmetrics.registerFont(font)
				registered.add(font.fontName)
		family_key = safe_font_name(self.family_name)
		names = self.font_names()
		reportlab.pdfbase.pdfmetrics.registerFontFamily(
			family_key,
			normal=names["regular"],
			bold=names["bold"],
			italic=names["italic"],
			boldItalic=names["bold_italic"],
		)
		return family_key


#============================================
def safe_font_name(value: str) -> str:
	"""
	Reduce a family name to a PDF-safe font name token.

	Args:
		value: Family name.

	Returns:
		Token with only letters, digits and hyphens.
	"""
	token = re.sub(r"[^A-Za-z0-9-]", "", value)[:63]
	return token or "Font"


#============================================
def style_font_name(family_name: str, style: FontStyle, handle: FontHandle | None = None) -> str:
	"""
	Build the registered name for one style of a family.

	ReportLab keeps one font per name for the whole process, so names of
	loaded faces carry a digest of the face source.

	Args:
		family_name: Family name.
		style: Queried style.
		handle: Face the name is bound to.

	Returns:
		Font name like "Arial-Oblique" or "Arial-Oblique-1a2b3c4d".
	"""
	name = f"{safe_font_name(family_name)}-{style.value.capitalize()}"
	if handle is not None:
		name = f"{name}-{handle.digest()}"
	return name


#============================================
def load_font_data(handle: FontHandle, font_name: str) -> TTFont:
	"""
	Load a font handle into a ReportLab TrueType font.

	Args:
		handle: Path or in-memory font handle.
		font_name: Name the font is registered under.

	Returns:
		Loaded TTFont.

	Raises:
		FontLoadError: When the data cannot be read or parsed.
	"""
	if handle.path is not None:
		source = str(handle.path)
	else:
		source = io.BytesIO(handle.data)
	try:
		font = TTFont(font_name, source, subfontIndex=handle.font_index)
	except (reportlab.pdfbase.ttfonts.TTFError, OSError, ValueError, struct.error) as exc:
		raise FontLoadError(f"Failed to load font {handle.describe()}: {exc}") from exc
	return font


#============================================
def query_style(family_name: str, style: FontStyle, catalogue: FontCatalogue) -> TTFont:
	"""
	Query the catalogue for one style and load the result.

	Args:
		family_name: Family name.
		style: Style to query.
		catalogue: Font catalogue.

	Returns:
		Loaded TTFont.
	"""
	handle = catalogue.select_best_match(family_name, style)
	return load_font_data(handle, style_font_name(family_name, style, handle))


#============================================
def query_styles(family_name: str, catalogue: FontCatalogue) -> dict[FontStyle, TTFont | None]:
	"""
	Query every style of a family once.

	The regular style is queried first and is required. Other styles that
	are missing or fail to load map to None.

	Args:
		family_name: Family name.
		catalogue: Font catalogue.

	Returns:
		Mapping of style to loaded font or None.

	Raises:
		NoRegularFontError: When the regular style is missing or unreadable.
	"""
	try:
		regular = query_style(family_name, FontStyle.NORMAL, catalogue)
	except FontError as exc:
		raise NoRegularFontError(f"No regular font available for '{family_name}': {exc}") from exc

	results: dict[FontStyle, TTFont | None] = {FontStyle.NORMAL: regular}
	for style in QUERY_STYLES[1:]:
		try:
			results[style] = query_style(family_name, style, catalogue)
		except FontError as exc:
			print(f"Failed to load {style.value} font for '{family_name}': {exc}")
			results[style] = None
	return results


#============================================
def reduce_family(family_name: str, results: dict[FontStyle, TTFont | None]) -> ResolvedFontFamily:
	"""
	Fill the four family slots from per-style query results.

	Bold uses the oblique face and italic the italic face, each falling back
	to regular. Bold italic is always the regular face.

	Args:
		family_name: Family name.
		results: Mapping from query_styles.

	Returns:
		ResolvedFontFamily.
	"""
	regular = results.get(FontStyle.NORMAL)
	if regular is None:
		raise NoRegularFontError(f"No regular font available for '{family_name}'")
	bold = results.get(FontStyle.OBLIQUE)
	if bold is None:
		bold = regular
	italic = results.get(FontStyle.ITALIC)
	if italic is None:
		italic = regular
	return ResolvedFontFamily(
		family_name=family_name,
		regular=regular,
		bold=bold,
		italic=italic,
		bold_italic=regular,
	)


#============================================
def resolve_font_family(family_name: str, catalogue: FontCatalogue) -> ResolvedFontFamily:
	"""
	Resolve a complete font family from a catalogue.

	Args:
		family_name: Family name, for example "Arial".
		catalogue: Font catalogue.

	Returns:
		ResolvedFontFamily.
	"""
	results = query_styles(family_name, catalogue)
	return reduce_family(family_name, results)
