#!/usr/bin/env python3
"""
Account Core Entry Point

Starts the FastAPI server for the account core.
"""

import sys

from account_core.api import run_server
from account_core.config import get_config


if __name__ == "__main__":
    config = get_config()
    print("Starting account service...")
    print(f"API available at: http://localhost:{config.api_port}")
    print(f"Documentation at: http://localhost:{config.api_port}/docs")

    try:
        run_server()
    except KeyboardInterrupt:
        print("\nShutting down account service...")
    except Exception as e:
        print(f"Error starting server: {e}")
        sys.exit(1)
