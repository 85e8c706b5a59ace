#!/usr/bin/env python3
"""
Safe file I/O utilities with size limits and error handling.
"""

import os
import logging
from typing import List, Optional, Tuple
from pathlib import Path

from ..config import MAX_FILE_SIZE_MB, SUPPORTED_EXTENSIONS

logger = logging.getLogger(__name__)


def read_file_bytes(path: str) -> Tuple[Optional[bytes], Optional[str]]:
    """
    Read a file as raw bytes.

    Decoding is left to the tokenizer so invalid UTF-8 is reported as a
    parse error rather than guessed around.

    Args:
        path: File path to read

    Returns:
        (data, None) or (None, error_message) on failure
    """
    if not os.path.isfile(path):
        return None, f"File not found: {path}"

    file_size_mb = os.path.getsize(path) / (1024 * 1024)
    if file_size_mb > MAX_FILE_SIZE_MB:
        return None, f"File too large ({file_size_mb:.1f} MB > {MAX_FILE_SIZE_MB} MB limit)"

    try:
        with open(path, 'rb') as f:
            data = f.read()
    except PermissionError:
        return None, f"Permission denied: {path}"
    except OSError as e:
        return None, f"Read error: {e}"

    logger.debug("Read %d bytes from %s", len(data), path)
    return data, None


def is_xml_path(path: str) -> bool:
    return Path(path).suffix.lower() in SUPPORTED_EXTENSIONS


def find_xml_files(folder: str) -> List[str]:
    """
    Recursively find all XML files in a folder.

    Args:
        folder: Root folder to search

    Returns:
        Sorted list of XML file paths
    """
    xml_files = []
    for root, _, files in os.walk(folder):
        for f in files:
            if is_xml_path(f):
                xml_files.append(os.path.join(root, f))
    return sorted(xml_files)
