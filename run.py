"""Development runner.
Usage: python run.py  (reads .env if present)
"""

from __future__ import annotations

from dotenv import load_dotenv

from studio import create_app

load_dotenv()

app = create_app()

if __name__ == "__main__":  # pragma: no cover
    import os
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3000"))
    app.run(debug=os.getenv("APP_ENV", "development") == "development", host=host, port=port)
