"""Mod unit scanning."""

from .models import ScanResult, SourceKind
from .scanner import (
    ASSETS_DIRNAME,
    LANG_DIRNAME,
    LANG_FILE_SUFFIXES,
    ModScanner,
    is_lang_file,
    lang_prefix_of,
    normalize_candidates,
)

__all__ = [
    "ASSETS_DIRNAME",
    "LANG_DIRNAME",
    "LANG_FILE_SUFFIXES",
    "ModScanner",
    "ScanResult",
    "SourceKind",
    "is_lang_file",
    "lang_prefix_of",
    "normalize_candidates",
]
