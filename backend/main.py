"""
Main FastAPI Application
=======================

Entry point for the shapegeom API server.
"""

import uvicorn
import logging
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dotenv import load_dotenv
load_dotenv()  # Load .env file

from api.router import api_router
from services.logging_service import init_logging


# Custom colored formatter for better log readability
class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for better log readability"""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'      # Reset
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname, '')
        reset = self.COLORS['RESET']
        # Work on a copy so file/ring handlers keep the plain level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{reset}"
        return super().format(record)


def setup_logging():
    """Set up console logging"""

    # Clear any existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(ColoredFormatter("%(levelname)s %(name)s: %(message)s"))

    root_logger.setLevel(logging.INFO)
    root_logger.addHandler(console_handler)


# Initialize logging
setup_logging()
try:
    # Add rotating file + ring buffer handlers
    init_logging()
except OSError as e:
    # Do not fail startup if file logging isn't available
    logging.getLogger(__name__).warning(f"File logging disabled: {e}")
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="shapegeom API",
    description="Shapefile record validation and GeoJSON geometry reconstruction",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/health")
async def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=False)
