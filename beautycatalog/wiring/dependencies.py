import logging

from beautycatalog.application.ports.catalog_backend import CatalogBackendPort
from beautycatalog.application.ports.credentials import CredentialProviderPort
from beautycatalog.application.ports.datastore import DatastorePort
from beautycatalog.application.use_cases.catalog_facade import CatalogFacade
from beautycatalog.application.use_cases.resolve_catalog import (
    CatalogTier,
    ResolveCatalogUseCase,
    final_when_inactive_explicitly_excluded,
)
from beautycatalog.core.config import settings
from beautycatalog.domain.entities.catalog import CatalogProduct, CatalogService
from beautycatalog.infrastructure.auth.credentials import (
    HeaderCredentialProvider,
    SessionFileCredentialProvider,
    StaticCredentialProvider,
)
from beautycatalog.infrastructure.backend.backend_client import HttpCatalogBackend
from beautycatalog.infrastructure.datastore.memory_datastore import MemoryDatastore
from beautycatalog.infrastructure.datastore.postgrest_datastore import PostgrestDatastore
from beautycatalog.infrastructure.sources.backend_source import BackendProductSource, BackendServiceSource
from beautycatalog.infrastructure.sources.legacy_source import LegacyProductSource, LegacyServiceSource
from beautycatalog.infrastructure.sources.primary_source import PrimaryProductSource, PrimaryServiceSource
from beautycatalog.infrastructure.sources.specialized_source import (
    SpecializedProductSource,
    SpecializedServiceSource,
)

logger = logging.getLogger(__name__)

_memory_datastore: MemoryDatastore | None = None


def get_backend() -> CatalogBackendPort:
    return HttpCatalogBackend()


def get_datastore() -> DatastorePort:
    global _memory_datastore
    provider = settings.DATASTORE_PROVIDER.lower()
    if provider == "postgrest" or (provider == "auto" and settings.SUPABASE_URL):
        return PostgrestDatastore()
    if _memory_datastore is None:
        logger.info("Using MemoryDatastore (SUPABASE_URL not set or DATASTORE_PROVIDER=memory)")
        _memory_datastore = MemoryDatastore()
    return _memory_datastore


def get_credentials(authorization: str | None = None) -> CredentialProviderPort:
    if authorization:
        return HeaderCredentialProvider(authorization)
    if settings.SESSION_FILE:
        return SessionFileCredentialProvider(settings.SESSION_FILE)
    return StaticCredentialProvider(settings.SESSION_TOKEN)


def build_service_resolver(
    backend: CatalogBackendPort,
    datastore: DatastorePort,
    credentials: CredentialProviderPort,
) -> ResolveCatalogUseCase[CatalogService]:
    return ResolveCatalogUseCase(
        "service",
        [
            CatalogTier(SpecializedServiceSource(backend, credentials)),
            CatalogTier(PrimaryServiceSource(datastore)),
            CatalogTier(BackendServiceSource(backend)),
            CatalogTier(LegacyServiceSource(datastore)),
        ],
    )


def build_product_resolver(
    backend: CatalogBackendPort,
    datastore: DatastorePort,
    credentials: CredentialProviderPort,
) -> ResolveCatalogUseCase[CatalogProduct]:
    return ResolveCatalogUseCase(
        "product",
        [
            CatalogTier(SpecializedProductSource(backend, credentials)),
            CatalogTier(PrimaryProductSource(datastore), empty_is_final=final_when_inactive_explicitly_excluded),
            CatalogTier(BackendProductSource(backend)),
            CatalogTier(LegacyProductSource(datastore)),
        ],
    )


def build_catalog_facade(
    backend: CatalogBackendPort,
    datastore: DatastorePort,
    credentials: CredentialProviderPort,
) -> CatalogFacade:
    return CatalogFacade(
        services=build_service_resolver(backend, datastore, credentials),
        products=build_product_resolver(backend, datastore, credentials),
        backend=backend,
        credentials=credentials,
    )


def get_catalog_facade(authorization: str | None = None) -> CatalogFacade:
    return build_catalog_facade(
        backend=get_backend(),
        datastore=get_datastore(),
        credentials=get_credentials(authorization),
    )
