from __future__ import annotations

from vidcube.app import create_app, main

# uvicorn app:app
app = create_app()

if __name__ == "__main__":
    main(app)
