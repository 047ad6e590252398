from schematree.logger import get_logger

__version__ = "0.3.0"

log = get_logger("schematree")
