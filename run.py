"""Entry point for the Student Directory console.

This script starts the interactive console against the backend named by
``STUDENT_API_BASE_URL`` (or ``--base-url``).  It is intended to be
executed from the project root without installing the package.

Usage:
    python run.py --base-url http://localhost:8080/api
"""

from student_directory.console import main


if __name__ == "__main__":
    main()
