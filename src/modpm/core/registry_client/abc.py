"""Registry client interface.

Architecture:
- RegistryClient: Abstract base class for module registry queries
- RealRegistryClient: Production implementation with mirror failover over HTTP
- FakeRegistryClient (tests/fakes/registry.py): In-memory implementation for tests
"""

from abc import ABC, abstractmethod

from modpm.core.lookup import Lookup
from modpm.core.registry_client.types import ModuleMetadata


class RegistryClient(ABC):
    """Abstract interface for the module registry.

    All implementations (real and fake) must implement this interface.
    """

    @abstractmethod
    def fetch_metadata(self, name: str) -> Lookup[ModuleMetadata]:
        """Fetch the registry record for `name`.

        Returns:
            Found(metadata) for the first complete record,
            Absent() if every mirror reported the module as unknown,
            Failed(reason) with the per-mirror errors otherwise
        """
        ...

    @abstractmethod
    def probe_available(self) -> str:
        """Return the URL of the first mirror that answers without a server error.

        Raises:
            MirrorsUnreachableError: If no mirror responds
        """
        ...

    @abstractmethod
    def increment_download_count(self, name: str) -> None:
        """Report a fresh install of `name` to the registry.

        Raises:
            MirrorError: If no mirror accepted the increment
        """
        ...

    @abstractmethod
    def list_all_modules(self) -> list[str]:
        """List every module name published on the registry.

        Raises:
            MirrorsUnreachableError: If no mirror responds
            MirrorError: If the responding mirror returns an error
        """
        ...
