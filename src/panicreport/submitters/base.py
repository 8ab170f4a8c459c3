"""
Base submitter abstraction for report collection endpoints.

Defines the interface that all submitters must implement.
"""

from abc import ABC, abstractmethod

from ..schemas.base import CreateErrorReportInput


class BaseReportSubmitter(ABC):
    """Abstract base class for report submitters.

    A report goes through three calls: ``open_report`` returns an upload
    target, ``upload_archive`` sends the zipped schema folder to it, and
    ``complete_report`` marks the report done and returns its id.
    """

    @abstractmethod
    def open_report(self, data: CreateErrorReportInput) -> str:
        """
        Open a report on the collection endpoint.

        Args:
            data: Report metadata, with the schema already redacted

        Returns:
            Upload target (signed URL) for the archive
        """
        pass

    @abstractmethod
    def upload_archive(self, archive: bytes, upload_target: str) -> None:
        """
        Upload the report archive.

        Args:
            archive: Zip payload built from redacted files
            upload_target: Value returned by ``open_report``
        """
        pass

    @abstractmethod
    def complete_report(self, upload_target: str) -> int:
        """
        Mark the report as complete.

        Args:
            upload_target: Value returned by ``open_report``

        Returns:
            Report id assigned by the endpoint
        """
        pass

    def close(self) -> None:
        """Release any held resources (connections, files)."""

    @classmethod
    @abstractmethod
    def get_submitter_name(cls) -> str:
        """Get the submitter name (e.g., 'graphql', 'local')."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
