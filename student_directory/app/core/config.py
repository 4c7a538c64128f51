"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
client can start against a locally running backend without any
setup.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    """Client settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Student Management System")

    # Base URL of the student backend.  Paths such as ``/students`` are
    # appended to it, so include any ``/api`` prefix here.
    api_base_url: str = os.getenv("STUDENT_API_BASE_URL", "http://localhost:8080/api")

    # Timeout in seconds applied to every request made by the HTTP client.
    request_timeout: float = float(os.getenv("STUDENT_API_TIMEOUT", "15"))

    # Delay before the form navigates back to the directory after a
    # successful submission.
    redirect_delay_seconds: float = float(os.getenv("REDIRECT_DELAY_SECONDS", "2.0"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
