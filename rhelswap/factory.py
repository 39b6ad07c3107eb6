"""Universal backend factory and dashboard composition root.

:func:`universal_factory` builds one backend component (directory, store
or notifier) for a provider, validating its config first.
:func:`build_dashboard` wires a complete :class:`Dashboard` from provider
names and raw config dicts; it is what the CLI and any web layer call.
"""

from typing import overload, Literal, Any

from rhelswap.base import (
    ComputeDirectoryBlueprint,
    SnapshotStoreBlueprint,
    ChangeNotifierBlueprint,
    existing_components,
    existing_providers,
)
from rhelswap.base.client_cache import ClientRegistry
from rhelswap.base.config import CacheConfig, UpdaterConfig, validate_config
from rhelswap.cache import SnapshotCache
from rhelswap.dashboard import Dashboard
from rhelswap.gcp.factory import SERVICE_REGISTRY as GCP_SERVICES
from rhelswap.local.factory import SERVICE_REGISTRY as LOCAL_SERVICES
from rhelswap.updater import LicenseUpdater


# Nested factory registry: provider -> component registry
_FACTORY_REGISTRY: dict[str, dict[str, type]] = {
    "gcp": GCP_SERVICES,
    "local": LOCAL_SERVICES,
}


@overload
def universal_factory(
    component: Literal["directory"], provider: existing_providers, config: dict
) -> ComputeDirectoryBlueprint: ...


@overload
def universal_factory(
    component: Literal["store"], provider: existing_providers, config: dict
) -> SnapshotStoreBlueprint: ...


@overload
def universal_factory(
    component: Literal["notifier"], provider: existing_providers, config: dict
) -> ChangeNotifierBlueprint: ...


def universal_factory(
    component: existing_components,
    provider: existing_providers,
    config: dict,
    **kwargs: Any,
) -> Any:
    """
    Create a backend component for the given provider.
    Args:
        component: The component name ('directory', 'store', 'notifier').
        provider: The backend provider ('gcp', 'local').
        config: Configuration dictionary validated against the provider's model.
        **kwargs: Extra constructor arguments (e.g. ``registry`` for a directory).
    Returns:
        An instance of the requested component class.
    Raises:
        ValueError: If the provider or component is not supported.
    """
    if provider not in _FACTORY_REGISTRY:
        raise ValueError(f"Unsupported provider: {provider}")

    provider_components = _FACTORY_REGISTRY[provider]

    if component not in provider_components:
        raise ValueError(
            f"Unsupported component '{component}' for provider '{provider}'"
        )

    component_class = provider_components[component]
    config_obj = validate_config(provider, config)
    return component_class(config_obj, **kwargs)


def build_dashboard(
    *,
    gcp_config: dict | None = None,
    store_provider: existing_providers = "local",
    store_config: dict | None = None,
    notifier_provider: existing_providers | None = None,
    notifier_config: dict | None = None,
    cache_config: dict | None = None,
    updater_config: dict | None = None,
    registry: ClientRegistry | None = None,
) -> Dashboard:
    """Compose a dashboard backed by Compute Engine.

    Args:
        gcp_config: Config for the Compute Engine directory (credentials).
        store_provider: Where snapshots live ('local' files or 'gcp' bucket).
        store_config: Config for the store provider.
        notifier_provider: Change notifier provider, or None for no events.
        notifier_config: Config for the notifier provider.
        cache_config: :class:`CacheConfig` fields (e.g. ``ttl_seconds``).
        updater_config: :class:`UpdaterConfig` fields.
        registry: Shared client registry; a new one is created when omitted.

    Returns:
        A ready :class:`Dashboard`.
    """
    directory = universal_factory(
        "directory", "gcp", gcp_config or {}, registry=registry or ClientRegistry()
    )
    store = universal_factory("store", store_provider, store_config or {})
    notifier = None
    if notifier_provider is not None:
        notifier = universal_factory("notifier", notifier_provider, notifier_config or {})
    cache = SnapshotCache(directory, store, CacheConfig(**(cache_config or {})))
    updater = LicenseUpdater(directory, UpdaterConfig(**(updater_config or {})))
    return Dashboard(cache, updater, notifier)
