from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from typing_extensions import Self

from wirebox._internal.autowiring import AutowiringPolicy
from wirebox._internal.integrations.pydantic_settings import is_pydantic_settings_subclass
from wirebox._internal.resolution_stack import resolving
from wirebox._internal.type_checks import is_runtime_class
from wirebox._internal.type_registry import TypeRegistry, qualified_name
from wirebox.config import Repository
from wirebox.contextual import ContextualBindingBuilder
from wirebox.contracts import (
    BootableServiceProviderProtocol,
    ContainerProtocol,
    ServiceProviderProtocol,
)
from wirebox.definition import Definition
from wirebox.exceptions import (
    WireboxAliasNotFoundError,
    WireboxCircularDependencyError,
    WireboxContainerError,
    WireboxDefinitionError,
    WireboxDefinitionNotFoundError,
    WireboxNotFoundError,
    WireboxOverwriteExistingServiceError,
    WireboxResolverError,
)
from wirebox.resolver import Resolver
from wirebox.settings import ContainerSettings

logger = logging.getLogger(__name__)

ResolveCallback = Callable[[Any, "Container"], Any]


class Container:
    """Register definitions and build the values of container keys.

    Keys are usually classes, but any hashable value works (for example
    string service names). Each key maps to a ``Definition``; ``get`` builds
    shared definitions once and caches them, other definitions are rebuilt
    on every request. ``call`` autowires any class or callable without
    registering it.

    Examples:
        .. code-block:: python

            container = Container(autowire=True)
            container.define_shared(Database).set_param("dsn", "sqlite://")
            container.define(Storage, S3Storage)
            container.when(ReportService).needs("$bucket").give("reports")

            service = container.get(ReportService)

    """

    def __init__(
        self,
        definitions: Mapping[Any, Any] | Container | None = None,
        *,
        autowire: bool | None = None,
        shared: bool | None = None,
        settings: ContainerSettings | None = None,
    ) -> None:
        """Initialize a container.

        Args:
            definitions: Initial definitions, as a mapping of keys to
                ``Definition`` objects / concretes, or another container whose
                definitions are copied.
            autowire: Define unknown class keys on demand. Defaults to
                ``settings.autowire``.
            shared: Cache every key, not only shared definitions. Defaults to
                ``settings.shared``.
            settings: Container defaults; read from ``WIREBOX_*`` environment
                variables when omitted.

        """
        settings = settings if settings is not None else ContainerSettings()
        self._autowire = settings.autowire if autowire is None else autowire
        self._shared = settings.shared if shared is None else shared
        self._detect_cycles = settings.detect_cycles

        self._types = TypeRegistry()
        self._resolver = Resolver(self)
        self._autowiring_policy = AutowiringPolicy()
        self._config = Repository()

        self._definitions: dict[Any, Definition] = {}
        self._instances: dict[Any, Any] = {}
        self._aliases: dict[Any, Any] = {}
        self._before_resolve: dict[Any, list[ResolveCallback]] = {}
        self._after_resolve: dict[Any, list[ResolveCallback]] = {}
        self._contextual: dict[Any, dict[Any, Any]] = {}
        self._resolved_bindings: dict[Any, dict[Any, Any]] = {}
        self._containers: list[Container] = []
        self._providers: dict[type[Any], Any] = {}
        self._unregistered_providers: list[type[Any]] = []
        self._bootable_providers: list[type[Any]] = []
        self._deferred_providers: list[type[Any]] = []
        self._services_booted = False

        if definitions is not None:
            self.add_definitions(definitions)

        self.instance(type(self), self)
        if type(self) is not Container:
            self.alias(Container, type(self))
        self.alias(ContainerProtocol, type(self))

    # region Configuration
    @property
    def types(self) -> TypeRegistry:
        return self._types

    def register_type(self, cls: type[Any], name: str | None = None) -> type[Any]:
        """Make ``cls`` reachable by name for string targets and string annotations."""
        return self._types.register(cls, name)

    def autowire(self, enable: bool = True) -> Self:  # noqa: FBT001, FBT002
        self._autowire = enable
        return self

    def shared_by_default(self, shared: bool = True) -> Self:  # noqa: FBT001, FBT002
        self._shared = shared
        return self

    def config(self, key: str | None = None, default: Any = None) -> Any:
        """Return the configuration repository, or the value stored under ``key``."""
        if key is None:
            return self._config
        return self._config.get(key, default)

    def get_resolver(self) -> Resolver:
        return self._resolver

    # endregion Configuration

    # region Definitions
    def add_definitions(self, definitions: Mapping[Any, Any] | Container) -> Self:
        items = definitions.export() if isinstance(definitions, Container) else definitions
        for key, definition in items.items():
            self.define(key, definition)
        return self

    def define(self, key: Any, value: Any = None) -> Definition:
        """Define ``key``, building it from ``value`` (or from ``key`` itself when omitted).

        Raises:
            WireboxOverwriteExistingServiceError: when ``key`` is already defined or resolved.
            WireboxInvalidDefinitionError: when the concrete cannot be reflected.

        """
        if self.has_definition(key) or self.resolved(key):
            msg = (
                f'Key "{_key_name(key)}" already defined in this container. Use the extend() '
                "method to extend its definition or override() to replace the existing definition."
            )
            raise WireboxOverwriteExistingServiceError(msg)

        definition = self._make_definition(key, value)
        self._definitions[key] = definition
        return definition

    def define_shared(self, key: Any, value: Any = None) -> Definition:
        return self.define(key, value).set_shared()

    def override(self, key: Any, value: Any = None) -> Definition:
        """Define ``key`` or replace its definition, dropping any cached instance."""
        definition = self._make_definition(key, value)
        if key in self._definitions:
            logger.debug("Overriding definition for key %s", _key_name(key))
        self._definitions[key] = definition
        self._instances.pop(key, None)
        return definition

    def override_shared(self, key: Any, value: Any = None) -> Definition:
        return self.override(key, value).set_shared()

    def extend(self, key: Any) -> Definition:
        """Return the existing definition of ``key`` for further configuration.

        Raises:
            WireboxNotFoundError: when ``key`` is not defined.

        """
        try:
            return self.get_definition(key)
        except WireboxDefinitionNotFoundError as error:
            msg = f'Key "{_key_name(key)}" can not be extended because it is not defined in this container.'
            raise WireboxNotFoundError(msg) from error

    def get_definition(self, key: Any) -> Definition:
        if not self._find_definition(key):
            msg = f"Service definition {_key_name(key)} does not exist in the container."
            raise WireboxDefinitionNotFoundError(msg)
        return self._definitions[key]

    def has_definition(self, key: Any) -> bool:
        return key in self._definitions

    def export(self) -> dict[Any, Definition]:
        return dict(self._definitions)

    def _make_definition(self, key: Any, value: Any) -> Definition:
        if isinstance(value, Definition):
            definition = value
        else:
            definition = Definition(key if value is None else value, types=self._types)
        for candidate in (key, definition.concrete):
            if is_runtime_class(candidate):
                self._types.register(candidate)
        return definition

    # endregion Definitions

    # region Resolution
    def has(self, key: Any) -> bool:
        """Return whether ``key`` has a cached instance or a definition."""
        return self.resolved(key) or self._find_definition(key)

    def resolved(self, key: Any) -> bool:
        return key in self._instances

    def instance(self, key: Any, value: Any) -> None:
        """Store a pre-built value for ``key``."""
        self._instances[key] = value

    def get(self, key: Any) -> Any:
        """Return the value of ``key``, building and caching shared definitions once.

        Raises:
            WireboxNotFoundError: when ``key`` has no definition, no alias and
                cannot be autowired.
            WireboxResolverError: when building the value fails.

        """
        if key in self._instances:
            return self._instances[key]

        if not self._find_definition(key):
            if self.is_alias(key):
                return self.get(self._aliases[key])
            self._define_autowired(key, f'Key "{_key_name(key)}" is not found in this container.')

        definition = self._definitions[key]
        value = self._resolve(key, definition)
        if definition.is_shared() or self._shared:
            self._instances[key] = value
        return value

    def get_safe(self, key: Any, default: Any = None) -> Any:
        """Return the value of ``key``, or ``default`` when it cannot be found."""
        try:
            return self.get(key)
        except WireboxNotFoundError:
            return default

    def make(self, key: Any) -> Any:
        """Build a fresh value of ``key``, ignoring any cached instance."""
        return self.make_with(key, {})

    def make_with(self, key: Any, args: Mapping[Any, Any]) -> Any:
        """Build a fresh value of ``key`` with extra resolver arguments."""
        if not self._find_definition(key):
            if self.is_alias(key):
                return self.make_with(self._aliases[key], args)
            self._define_autowired(key, f'No definition found for key "{_key_name(key)}".')

        return self._resolve(key, self._definitions[key], args)

    def call(self, target: Any, args: Mapping[Any, Any] | None = None) -> Any:
        """Autowire and invoke ``target`` (a class, method pair, or callable).

        Raises:
            WireboxResolverError: when the target cannot be built or invoked.

        """
        return self._resolver.resolve(target, args)

    def forget(self, key: Any) -> None:
        """Drop the definition and cached instance of ``key``.

        Raises:
            WireboxNotFoundError: when ``key`` is neither defined nor resolved.

        """
        if not self.has_definition(key) and not self.resolved(key):
            msg = f'Service "{_key_name(key)}" does not exist in the container.'
            raise WireboxNotFoundError(msg)
        self._definitions.pop(key, None)
        self._instances.pop(key, None)

    def before_resolving(self, key: Any, callback: ResolveCallback) -> None:
        """Run ``callback(definition, container)`` before ``key`` is built."""
        self._before_resolve.setdefault(key, []).append(callback)

    def after_resolving(self, key: Any, callback: ResolveCallback) -> None:
        """Run ``callback(instance, container)`` after ``key`` is built."""
        self._after_resolve.setdefault(key, []).append(callback)

    def _resolve(self, key: Any, definition: Definition, args: Mapping[Any, Any] | None = None) -> Any:
        for callback in self._before_resolve.get(key, ()):
            callback(definition, self)

        with self._resolving(key):
            instance = definition.resolve(self, args)

        for callback in self._after_resolve.get(key, ()):
            callback(instance, self)
        return instance

    @contextmanager
    def _resolving(self, key: Any) -> Iterator[None]:
        if not self._detect_cycles:
            yield
            return
        with resolving(self, key):
            yield

    def _define_autowired(self, key: Any, not_found_message: str) -> None:
        if not self._autowire:
            raise WireboxNotFoundError(not_found_message)

        concrete = self._types.find(key) if isinstance(key, str) else key
        if not self._autowiring_policy.is_eligible_concrete(concrete):
            msg = f"{not_found_message[:-1]} and it could not be defined automatically using autowiring."
            raise WireboxNotFoundError(msg)

        try:
            definition = self.define(key, concrete)
        except WireboxDefinitionError as error:
            msg = f"{not_found_message[:-1]} and it could not be defined automatically using autowiring."
            raise WireboxNotFoundError(msg) from error

        if is_pydantic_settings_subclass(concrete):
            definition.set_shared()

    def _find_definition(self, key: Any) -> bool:
        if self.has_definition(key):
            return True

        for provider_class in list(self._unregistered_providers):
            provider = self._providers[provider_class]
            if not provider.provides_key(key):
                continue
            self._unregistered_providers.remove(provider_class)
            logger.debug("Registering deferred service provider %s", qualified_name(provider_class))
            self.call((provider, "register"))
            if self.has_definition(key):
                return True

        for container in self._containers:
            try:
                definition = container.get_definition(key)
            except WireboxDefinitionNotFoundError:
                continue
            self._definitions[key] = definition
            return True

        return False

    # endregion Resolution

    # region Aliases
    def alias(self, name: Any, target: Any) -> None:
        """Make ``name`` resolve to the service registered under ``target``."""
        self._aliases[name] = target

    def get_alias(self, name: Any) -> Any:
        """Return the key ``name`` points to.

        Raises:
            WireboxAliasNotFoundError: when ``name`` is not an alias.

        """
        if not self.is_alias(name):
            msg = f'Alias name "{_key_name(name)}" does not exist.'
            raise WireboxAliasNotFoundError(msg)
        return self._aliases[name]

    def is_alias(self, name: Any) -> bool:
        try:
            return name in self._aliases
        except TypeError:
            return False

    # endregion Aliases

    # region Contextual Bindings
    def when(self, *concretes: Any) -> ContextualBindingBuilder:
        """Start a contextual binding for one or more consuming classes."""
        if len(concretes) == 1 and isinstance(concretes[0], (list, tuple)):
            concretes = tuple(concretes[0])
        return ContextualBindingBuilder(self, concretes)

    def add_contextual_binding(self, concrete: Any, needs: Any, implementation: Any) -> None:
        """Give ``implementation`` to ``concrete`` whenever it needs ``needs``.

        ``needs`` is a class (or its registered name) or ``"$name"`` for a
        parameter name.
        """
        if self.is_alias(needs):
            needs = self._aliases[needs]
        elif isinstance(needs, str) and not needs.startswith("$"):
            needs = self._types.find(needs) or needs

        if isinstance(concrete, str):
            concrete = self._types.find(concrete) or concrete

        self._contextual.setdefault(concrete, {})[needs] = implementation
        self._resolved_bindings.clear()

    def get_contextual_bindings(self, declaring_type: Any) -> Mapping[Any, Any]:
        """Return the contextual bindings of ``declaring_type`` with their values resolved.

        Class implementations are resolved with ``get``, callables with
        ``call`` (falling back to the callable itself when it cannot be
        autowired), other values are returned as is. Results are cached until
        a new binding is added.
        """
        if declaring_type in self._resolved_bindings:
            return self._resolved_bindings[declaring_type]

        resolved: dict[Any, Any] = {}
        for needs, implementation in (self.find_contextual_binding(declaring_type) or {}).items():
            resolved[needs] = self._resolve_binding(implementation)

        self._resolved_bindings[declaring_type] = resolved
        return resolved

    def find_contextual_binding(self, declaring_type: Any) -> dict[Any, Any] | None:
        """Return the raw bindings of ``declaring_type`` or of its closest base class."""
        if declaring_type in self._contextual:
            return self._contextual[declaring_type]
        if not is_runtime_class(declaring_type):
            return None

        for klass in declaring_type.__mro__:
            for candidate in (klass, qualified_name(klass)):
                bindings = self._contextual.get(candidate)
                if bindings:
                    return bindings
        return None

    def _resolve_binding(self, implementation: Any) -> Any:
        if is_runtime_class(implementation):
            return self.get(implementation)
        if isinstance(implementation, str) and implementation in self._types:
            return self.get(self._types.get(implementation))
        if callable(implementation):
            try:
                return self.call(implementation)
            except WireboxCircularDependencyError:
                raise
            except WireboxResolverError as error:
                logger.debug(
                    "Contextual binding %r could not be called, binding it as a value: %s",
                    implementation,
                    error,
                )
        return implementation

    # endregion Contextual Bindings

    # region Service Providers
    def register_service_provider(self, provider: Any) -> None:
        """Register a service provider instance, class or registered class name.

        A provider must implement ``register``/``provides_key`` (deferred
        registration), ``boot``/``boot_deferred`` (boot hooks), or ``init``
        (called immediately).

        Raises:
            WireboxContainerError: when ``provider`` is none of these.

        """
        if isinstance(provider, str) or is_runtime_class(provider):
            try:
                provider = self.call(provider)
            except WireboxCircularDependencyError:
                raise
            except WireboxResolverError as error:
                msg = f"Service provider {provider!r} could not be created: {error}"
                raise WireboxContainerError(msg) from error

        is_deferred = isinstance(provider, ServiceProviderProtocol)
        is_bootable = isinstance(provider, BootableServiceProviderProtocol)
        has_init = callable(getattr(provider, "init", None))
        if not (is_deferred or is_bootable or has_init):
            msg = (
                f"Service provider {provider!r} must implement register() and provides_key(), "
                "boot() and boot_deferred(), or an init() method."
            )
            raise WireboxContainerError(msg)

        provider_class = type(provider)
        logger.debug("Registering service provider %s", qualified_name(provider_class))

        if is_deferred:
            self._providers[provider_class] = provider
            self._unregistered_providers.append(provider_class)

        if is_bootable:
            self._providers[provider_class] = provider
            self._bootable_providers.append(provider_class)
            self._deferred_providers.append(provider_class)

        for name, target in getattr(provider, "aliases", {}).items():
            self.alias(name, target)

        if has_init:
            self.call((provider, "init"))

    def service_provider_exists(self, provider: type[Any]) -> bool:
        return provider in self._providers

    def boot_services(self) -> None:
        """Run ``boot`` then ``boot_deferred`` of every bootable provider, once.

        Raises:
            WireboxContainerError: when services were already booted.

        """
        if self._services_booted:
            msg = "Services are already booted."
            raise WireboxContainerError(msg)

        for provider_class in self._bootable_providers:
            self.call((self._providers[provider_class], "boot"))
        for provider_class in self._deferred_providers:
            self.call((self._providers[provider_class], "boot_deferred"))

        self._services_booted = True
        logger.debug("Booted %d service providers", len(self._bootable_providers))

    def bind_container(self, container: Container) -> Self:
        """Fall back to ``container`` for keys this container does not define."""
        self._containers.append(container)
        return self

    # endregion Service Providers

    # region Mapping Protocol
    def __contains__(self, key: object) -> bool:
        return self.has(key)

    def __getitem__(self, key: Any) -> Any:
        return self.get(key)

    def __setitem__(self, key: Any, value: Any) -> None:
        self.define(key, value)

    def __delitem__(self, key: Any) -> None:
        self.forget(key)

    # endregion Mapping Protocol


def _key_name(key: Any) -> str:
    if is_runtime_class(key):
        return qualified_name(key)
    return str(key)


__all__ = ["Container"]
