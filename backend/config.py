import os
from dotenv import load_dotenv

load_dotenv()

# --- API ---
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:8000,http://localhost:3000").split(",")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# --- Grid ---
GRID_CELL_SIZE_M = float(os.getenv("GRID_CELL_SIZE_M", "10"))

# Cells per request; the cell count grows with the square of the lines spanning the region
MAX_GRID_CELLS = int(os.getenv("MAX_GRID_CELLS", "40000"))

# Lines per request, both axes together
MAX_GRID_LINES = int(os.getenv("MAX_GRID_LINES", "4000"))

# --- Boundary framing ---
# Degrees added on every side of a boundary's extent when deriving grid bounds
BOUNDS_PADDING_DEG = float(os.getenv("BOUNDS_PADDING_DEG", "0.001"))
