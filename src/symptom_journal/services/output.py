"""
Output service for writing exported documents to disk.

Stands in for the share/save collaborator: accepts an exported blob and a
suggested file name and stores it in the configured output directory.
"""

import logging
from pathlib import Path

from symptom_journal.utils.exceptions import StorageError
from symptom_journal.utils.parameters import ExportConfig

logger = logging.getLogger(__name__)


class OutputService:
    """
    Service for writing export blobs to output files.
    """

    def __init__(self, config: ExportConfig) -> None:
        """
        Initialize output service.

        Args:
            config: Export configuration.
        """
        self.config = config
        self.output_dir = Path(config.output_dir).expanduser()

    def _write(self, file_name: str, data: bytes) -> Path:
        path = self.output_dir / file_name
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e
        return path

    def write_csv(self, content: str, file_name: str | None = None) -> Path:
        """
        Write CSV text as UTF-8.

        Args:
            content: CSV export text.
            file_name: Optional override of the configured file name.

        Returns:
            Path of the written file.
        """
        path = self._write(file_name or self.config.csv_file_name, content.encode("utf-8"))
        logger.info(f"Wrote CSV to {path}")
        return path

    def write_pdf(self, data: bytes, file_name: str) -> Path:
        """
        Write a rendered PDF document.

        Args:
            data: PDF bytes.
            file_name: Target file name.

        Returns:
            Path of the written file.
        """
        path = self._write(file_name, data)
        logger.info(f"Wrote {len(data)} byte PDF to {path}")
        return path
