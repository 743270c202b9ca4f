"""
Central configuration for backend settings.
"""
import os


# Shapefile main-file framing (fixed by the format, not runtime-configurable)
HEADER_LENGTH: int = 100
FILE_CODE: int = 9994
VERSION: int = 1000

# Caps applied before anything is allocated from a declared length/count
MAX_RECORD_CONTENT_LENGTH: int = 1_000_000
MAX_PARTS_OR_POINTS: int = 1_000_000


# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR: str = os.getenv("LOG_DIR", os.path.join(os.path.dirname(__file__), "..", "logs"))
RING_BUFFER_SIZE: int = int(os.getenv("RING_BUFFER_SIZE", "2000"))
RING_BUFFER_MIN_LEVEL: str = os.getenv("RING_BUFFER_MIN_LEVEL", "INFO").upper()
