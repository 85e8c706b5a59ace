"""
String Randomizer - string shuffling and XML pretty-printing.
"""

from .config import APP_NAME, APP_VERSION
from .formatter import pretty_print
from .models import ParseError
from .utils.text_utils import shuffle
