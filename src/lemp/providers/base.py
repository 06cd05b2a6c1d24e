"""Base provider interface."""

from abc import ABC, abstractmethod
from enum import Enum
from pydantic import BaseModel


class ProviderStatus(Enum):
    """Provider resource status."""
    PRESENT = "present"
    ABSENT = "absent"
    CONFLICT = "conflict"


class BaseProvider(ABC):
    """Base provider interface that all providers must implement."""

    @abstractmethod
    def status(self, spec: BaseModel) -> ProviderStatus:
        """Check the current status of a resource."""
        pass

    @abstractmethod
    def present(self, spec: BaseModel) -> None:
        """Ensure the resource is present."""
        pass

    @abstractmethod
    def validate_spec(self, spec: BaseModel) -> bool:
        """Validate the resource specification."""
        pass
