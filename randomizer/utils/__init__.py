"""
Utilities package - File I/O, XML file helpers, string shuffling, logging setup.
"""

from .file_utils import read_file_bytes, find_xml_files
from .xml_utils import read_xml_file, format_xml_file
from .text_utils import shuffle
from .logging_config import setup_logging
