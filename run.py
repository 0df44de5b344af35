#!/usr/bin/env python3
"""
sitesketch - Quick Start Script

Run this script to start the sitesketch server.
"""
import sys
import os

# Add the project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

if __name__ == "__main__":
    import uvicorn
    from sitesketch.config import get_settings, configure_logging

    settings = get_settings()
    configure_logging(settings.log_level)

    print("=" * 50)
    print("sitesketch")
    print("=" * 50)
    print(f"Server starting at http://{settings.host}:{settings.port}")
    print(f"Default provider: {settings.default_provider}")
    print("=" * 50)

    uvicorn.run(
        "sitesketch.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
