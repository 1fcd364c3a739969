import logging
import tempfile
import webbrowser
from pathlib import Path
from typing import Protocol


class PrintLauncher(Protocol):
    def open(self, html: str) -> bool:
        """Open the print document; False when no browser window could be opened"""
        ...


class BrowserPrintLauncher:
    """Writes the print document to a temporary file and opens it in a new browser window"""

    def __init__(self, directory: str = None):
        self.directory = directory

    def open(self, html: str) -> bool:
        with tempfile.NamedTemporaryFile("w", suffix=".html", delete=False,
                                         dir=self.directory, encoding="utf-8") as handle:
            handle.write(html)
            path = Path(handle.name)
        try:
            return webbrowser.open_new(path.as_uri())
        except webbrowser.Error as e:
            logging.error(f"Could not open print window: {e}")
            return False
