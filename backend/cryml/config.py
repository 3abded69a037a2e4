import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


DEBUG = _env_flag("CRYML_DEBUG")
COMPLEX_FLOW_THRESHOLD = int(os.getenv("CRYML_COMPLEX_FLOW_THRESHOLD", "20"))
DEFAULT_ERD_COLOR = os.getenv("CRYML_DEFAULT_ERD_COLOR", "yellow")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CRYML_CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]
