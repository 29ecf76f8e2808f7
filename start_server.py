"""
Start the Knowledge Hub backend server for local development
"""
import sys

import uvicorn

from app.core.config import settings

if __name__ == "__main__":
    print("Starting Knowledge Hub Backend Server...")
    print(f"Python: {sys.version}")

    try:
        uvicorn.run(
            "app.main:app",
            host="127.0.0.1",
            port=8000,
            reload=settings.debug,
            log_level=settings.log_level.lower(),
        )
    except KeyboardInterrupt:
        print("\nServer stopped by user")
