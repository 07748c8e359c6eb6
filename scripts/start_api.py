"""
Start FastAPI server

Runs the Scripture RAG API with auto-reload for local development.
"""

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import os

import uvicorn
from dotenv import load_dotenv


def main():
    load_dotenv()

    port = int(os.getenv("PORT", "8000"))

    print("=" * 60)
    print("Scripture RAG API")
    print("=" * 60)
    print(f"\nStarting server on http://localhost:{port}")
    print(f"API Docs: http://localhost:{port}/docs")
    print(f"Health Check: http://localhost:{port}/health")
    print("\nPress CTRL+C to stop\n")

    uvicorn.run(
        "scripture_rag.api.main:app",
        host="0.0.0.0",
        port=port,
        reload=True,
        log_level="info"
    )


if __name__ == "__main__":
    main()
