#!/usr/bin/env python3
import os
import logging
from pathlib import Path
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()


def _optional_float(name: str) -> float | None:
    """Reads a numeric env var, returning None when unset or invalid."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"{name}='{raw}' is not a number. Ignoring it (no timeout).")
        return None


# --- Configuration ---
BACKEND_URL = os.getenv('BACKEND_URL', 'https://ai-headshot-generator.onrender.com').rstrip('/')
PREVIEW_STYLE = os.getenv('PREVIEW_STYLE', 'preview_generation')
# No timeout unless configured; the preview call and the download block until they finish
PREVIEW_TIMEOUT = _optional_float('PREVIEW_TIMEOUT')
DOWNLOAD_TIMEOUT = _optional_float('DOWNLOAD_TIMEOUT')

PROJECT_ROOT = Path(os.getenv('STYLE_PROJECT_ROOT', os.getcwd()))
TEMPLATES_FILE = os.getenv('STYLE_TEMPLATES_FILE')
LOG_FILE_PATH = Path(os.getenv('STYLE_ADDER_LOG_FILE', 'style_adder.log'))

# --- Replicate predictions API (optional generator) ---
REPLICATE_API_URL = os.getenv('REPLICATE_API_URL', 'https://api.replicate.com/v1/predictions').rstrip('/')
REPLICATE_API_TOKEN = os.getenv('REPLICATE_API_TOKEN')
REPLICATE_MODEL_VERSION = os.getenv('REPLICATE_MODEL_VERSION')
REPLICATE_POLL_INTERVAL = 2.0
REPLICATE_MAX_ATTEMPTS = 60
