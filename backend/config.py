import os
import pathlib

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = pathlib.Path(__file__).parent.parent.absolute()
DATA_DIR = pathlib.Path(os.environ.get("ISOCITY_DATA_DIR", BASE_DIR / "data"))
OUTPUT_DIR = pathlib.Path(os.environ.get("ISOCITY_OUTPUT_DIR", BASE_DIR / "output"))

VENUE = os.environ.get("ISOCITY_VENUE", "pittsburgh")
MAX_BUILDINGS = int(os.environ.get("ISOCITY_MAX_BUILDINGS", "500"))
MIN_BUILDING_AREA = float(os.environ.get("ISOCITY_MIN_BUILDING_AREA", "100"))

LOG_LEVEL = os.environ.get("ISOCITY_LOG_LEVEL", "INFO").upper()
