from abc import ABC, abstractmethod

from jobflow.models import JobListing


class JobSource(ABC):
    name: str = "unknown"

    @abstractmethod
    def fetch(self, role: str | None = None, limit: int = 50) -> list[JobListing]:
        """Return normalized listings; ``[]`` when the endpoint is unavailable."""
