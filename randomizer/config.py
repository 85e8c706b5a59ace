#!/usr/bin/env python3
"""
Application configuration, constants, and theme definitions.
Centralizes all magic numbers, strings, and persisted app state.
"""

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

# ─── Version ───────────────────────────────────────────────
APP_NAME = "String Randomizer"
APP_VERSION = "0.3.0"
APP_TITLE = f"{APP_NAME} v{APP_VERSION}"
SOURCE_URL = "https://github.com/aalhendi/string-randomizer"

# ─── Paths ─────────────────────────────────────────────────
APP_DIR = Path(__file__).parent.resolve()
STATE_FILE = APP_DIR / "randomizer_state.json"
LOG_FILE = APP_DIR / "randomizer.log"

# ─── Logging ───────────────────────────────────────────────
LOGGER_NAME = "randomizer"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVEL = logging.INFO

# ─── Formatting ────────────────────────────────────────────
DEFAULT_INDENT = "  "
DEFAULT_NEWLINE = "\n"
MAX_FILE_SIZE_MB = 50
SUPPORTED_EXTENSIONS = {".xml"}

# ─── Sample content ────────────────────────────────────────
DEFAULT_INPUT = "Hello World!"
DEFAULT_INPUT_XML = (
    "<Customers>"
    "<Customer><Number>1</Number><FirstName>Fred</FirstName><LastName>Landis</LastName>"
    "<Address><Street>Oakstreet</Street><City>Boston</City><ZIP>23320</ZIP><State>MA</State>"
    "</Address></Customer>"
    "<Customer><Number>2</Number><FirstName>Michelle</FirstName><LastName>Butler</LastName>"
    "<Address><Street>First Avenue</Street><City>San-Francisco</City><ZIP>44324</ZIP>"
    "<State>CA</State></Address></Customer>"
    "<Customer><Number>3</Number><FirstName>Ted</FirstName><LastName>Little</LastName>"
    "<Address><Street>Long Way</Street><City>Los-Angeles</City><ZIP>34424</ZIP>"
    "<State>CA</State></Address></Customer>"
    "</Customers>"
)

# ─── Theme ─────────────────────────────────────────────────
@dataclass
class ThemeColors:
    """Color palette for a theme."""
    bg: str = "#ffffff"
    fg: str = "#212121"
    accent: str = "#1976d2"
    error: str = "#d32f2f"
    success: str = "#388e3c"
    surface: str = "#f5f5f5"
    editor_bg: str = "#fafafa"
    muted: str = "#757575"
    xml_tag: str = "#1565c0"
    xml_attr: str = "#f57c00"
    xml_string: str = "#388e3c"
    xml_comment: str = "#9e9e9e"

LIGHT_THEME = ThemeColors()
DARK_THEME = ThemeColors(
    bg="#1e1e1e",
    fg="#e0e0e0",
    accent="#64b5f6",
    error="#ef5350",
    success="#66bb6a",
    surface="#2d2d2d",
    editor_bg="#1e1e1e",
    muted="#9e9e9e",
    xml_tag="#569cd6",
    xml_attr="#9cdcfe",
    xml_string="#ce9178",
    xml_comment="#6a9955",
)
THEMES = {"Light": LIGHT_THEME, "Dark": DARK_THEME}


def _default_output() -> str:
    from .utils.text_utils import shuffle
    return shuffle(DEFAULT_INPUT)


def _default_output_xml() -> str:
    from .formatter import pretty_print
    return pretty_print(DEFAULT_INPUT_XML)


# ─── Application State (persisted) ────────────────────────
@dataclass
class AppState:
    """
    Text fields and window settings persisted across restarts.

    Every field is a plain string. Anything missing or malformed in the
    stored file falls back to the field default.
    """
    input: str = DEFAULT_INPUT
    output: str = field(default_factory=_default_output)
    input_xml: str = DEFAULT_INPUT_XML
    output_xml: str = field(default_factory=_default_output_xml)
    theme: str = "Light"
    window_geometry: str = ""
    last_directory: str = ""

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def save(self, path: Optional[Path] = None) -> bool:
        """Save state to disk. Returns False if writing failed."""
        target = Path(path) if path else STATE_FILE
        try:
            target.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
            return True
        except (OSError, TypeError) as e:
            logging.getLogger(__name__).warning("Failed to save state to %s: %s", target, e)
            return False

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "AppState":
        """Load state from disk, using defaults for anything unusable."""
        source = Path(path) if path else STATE_FILE
        logger = logging.getLogger(__name__)
        if not source.exists():
            return cls()
        try:
            data = json.loads(source.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Failed to load state from %s: %s", source, e)
            return cls()
        if not isinstance(data, dict):
            logger.warning("Ignoring state file %s: expected an object", source)
            return cls()

        kwargs = {}
        for f in fields(cls):
            value = data.get(f.name)
            if isinstance(value, str):
                kwargs[f.name] = value
            elif f.name in data:
                logger.warning("Ignoring malformed state field '%s'", f.name)
        return cls(**kwargs)
