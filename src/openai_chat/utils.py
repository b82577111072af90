"""Utility functions for the chat completion client."""

import logging
import sys
import uuid
from typing import Optional


def setup_logging(log_level: str = "INFO") -> None:
    """Setup application logging."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return str(uuid.uuid4())


def classify_error(error_message: str, status_code: Optional[int] = None) -> str:
    """Classify error message for better user experience."""
    error_lower = error_message.lower()

    if status_code == 401:
        return "Invalid API key. Please check your credentials."
    elif status_code == 429:
        return "Rate limit exceeded. Please try again later."
    elif status_code == 400:
        return "Bad request. Please check your input parameters."
    elif status_code == 404:
        return "Resource not found. Please check the base URL and model name."
    elif status_code is not None and status_code >= 500:
        return "Internal server error. Please try again later."
    elif "timeout" in error_lower:
        return "Request timeout. Please try again."
    elif "connection" in error_lower:
        return "Connection error. Please check your network."
    elif "quota" in error_lower:
        return "Quota exceeded. Please check your usage limits."
    else:
        return f"API Error: {error_message}" if error_message else "An error occurred while processing your request."
