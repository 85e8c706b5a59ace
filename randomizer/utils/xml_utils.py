#!/usr/bin/env python3
"""
XML file helpers shared by the GUI and the CLI.
"""

import shutil
import logging
from typing import Tuple, Optional

from ..config import DEFAULT_INDENT
from ..formatter import decode_document, pretty_print
from ..models import ParseError
from .file_utils import read_file_bytes

logger = logging.getLogger(__name__)


def read_xml_file(path: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Load an XML file as text, strictly as UTF-8.

    Args:
        path: Path to the XML file

    Returns:
        (text, None) or (None, error_message)
    """
    data, err = read_file_bytes(path)
    if data is None:
        return None, err
    try:
        return decode_document(data), None
    except ParseError as e:
        return None, f"Invalid encoding ({e.location}): {e}"


def format_xml_file(path: str, create_backup: bool = True,
                    indent: str = DEFAULT_INDENT) -> Tuple[bool, Optional[str]]:
    """
    Pretty-format an XML file in place.

    Creates a .bak backup before modifying. The file is read as raw bytes
    so invalid UTF-8 is reported instead of silently re-decoded.

    Args:
        path: Path to the XML file
        create_backup: Whether to create a backup
        indent: Indentation unit

    Returns:
        (success, error_message)
    """
    original, err = read_file_bytes(path)
    if original is None:
        return False, f"Cannot read file: {err}"

    try:
        formatted = pretty_print(original, indent=indent)
    except ParseError as e:
        return False, f"XML syntax error ({e.location}): {e}"

    if create_backup:
        try:
            shutil.copy2(path, path + ".bak")
        except OSError as e:
            logger.warning("Failed to create backup for %s: %s", path, e)

    try:
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(formatted)
        logger.info("Formatted %s", path)
        return True, None
    except OSError as e:
        return False, f"Cannot write file: {e}"
