from modpm.core.registry_client.abc import RegistryClient
from modpm.core.registry_client.mirrors import DEFAULT_SERVER_URLS, shuffled_server_urls
from modpm.core.registry_client.real import RealRegistryClient
from modpm.core.registry_client.types import ModuleMetadata, parse_module_metadata

__all__ = [
    "DEFAULT_SERVER_URLS",
    "ModuleMetadata",
    "RealRegistryClient",
    "RegistryClient",
    "parse_module_metadata",
    "shuffled_server_urls",
]
