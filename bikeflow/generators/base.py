"""
Base Generator
==============
Shared loading and file output for the traffic map and the SVG snapshot.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
import logging

from ..data.feed_loader import FeedLoader
from ..data.repository import BikeShareData
from ..config import OUTPUT_DIR

logger = logging.getLogger(__name__)


class BaseGenerator(ABC):
    """
    A generator renders one output document from stations and trips.

    Subclasses set output_filename and implement generate(); save()
    writes the document under OUTPUT_DIR unless given another path.
    """

    output_filename = "output.html"

    def __init__(self, data: Optional[BikeShareData] = None):
        # Standalone use: load both feeds
        self.data = data if data is not None else FeedLoader().load()
        if not self.data.loaded:
            logger.warning("Station or trip feed unavailable; output will be empty")

    @abstractmethod
    def generate(self) -> str:
        """Return the complete document as text."""

    def save(self, output_path: Optional[Path] = None) -> Path:
        """Render and write the document, creating parent directories."""
        path = Path(output_path) if output_path is not None else OUTPUT_DIR / self.output_filename
        path.parent.mkdir(parents=True, exist_ok=True)

        document = self.generate()
        path.write_text(document, encoding='utf-8')
        logger.info(f"Wrote {path} ({path.stat().st_size / 1024:.1f} KB)")
        return path

    def _log_progress(self, message: str) -> None:
        """Print a progress line and log it."""
        print(f"  {message}")
        logger.info(message)
