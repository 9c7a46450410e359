"""
Entry point for the HoopsDay tournament desk API.

Development (hot-reload):
    uv run python web_main.py       ← API on :8000
"""

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "hoopsday.web.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
