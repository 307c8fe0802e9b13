# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Launch the chat server on the configured port and open it in a browser."""

import sys
import threading
import time
import webbrowser

import uvicorn

from streamchat.core.config import load_app_config
from streamchat.main import create_app


def open_browser(host, port):
    """Wait a moment for the server to start, then open the browser."""
    time.sleep(1.5)
    webbrowser.open(f"http://{host}:{port}")


def main():
    config = load_app_config()
    host = config["server"]["host"]
    port = config["server"]["port"]

    # Start a thread to open the browser unless disabled
    if "--no-browser" not in sys.argv:
        threading.Thread(target=open_browser, args=(host, port), daemon=True).start()

    app = create_app(config)
    uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
