"""
Pytest configuration for local imports and shared font fixtures.
"""

# Standard Library
import os
import pathlib
import sys

# PIP3 modules
import pytest
import reportlab

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()

import label_sheet_generator.fonts

# Bitstream Vera faces shipped inside the reportlab package
REPORTLAB_FONTS_DIR = pathlib.Path(reportlab.__file__).resolve().parent / "fonts"
VERA_FAMILY = "Bitstream Vera Sans"


class CannedCatalogue(label_sheet_generator.fonts.FontCatalogue):
	"""
	Catalogue returning fixed handles per style and recording queries.
	"""

	def __init__(self, handles: dict) -> None:
		self.handles = dict(handles)
		self.queries = []

	def select_best_match(self, family_name, style):
		self.queries.append(style)
		handle = self.handles.get(style)
		if handle is None:
			raise label_sheet_generator.fonts.FontNotFoundError(
				f"no {style.value} face for '{family_name}'"
			)
		return handle


#============================================
@pytest.fixture
def fonts_dir() -> pathlib.Path:
	"""
	Directory holding the Vera test fonts.
	"""
	return REPORTLAB_FONTS_DIR


#============================================
@pytest.fixture
def vera_handles() -> dict:
	"""
	Path handles for regular, oblique and italic queries.
	"""
	FontStyle = label_sheet_generator.fonts.FontStyle
	FontHandle = label_sheet_generator.fonts.FontHandle
	return {
		FontStyle.NORMAL: FontHandle.from_path(REPORTLAB_FONTS_DIR / "Vera.ttf"),
		FontStyle.OBLIQUE: FontHandle.from_path(REPORTLAB_FONTS_DIR / "VeraBd.ttf"),
		FontStyle.ITALIC: FontHandle.from_path(REPORTLAB_FONTS_DIR / "VeraIt.ttf"),
	}


#============================================
@pytest.fixture
def canned_catalogue():
	"""
	Factory for catalogues with canned per-style results.
	"""
	return CannedCatalogue
