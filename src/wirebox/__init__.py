from wirebox.config import Repository
from wirebox.container import Container
from wirebox.contextual import ContextualBindingBuilder
from wirebox.contracts import ContainerProtocol, Factory
from wirebox.definition import Definition, MethodInvocation, PropertyAssignment, factory
from wirebox.exceptions import (
    WireboxAliasNotFoundError,
    WireboxCircularDependencyError,
    WireboxContainerError,
    WireboxDefinitionError,
    WireboxDefinitionNotFoundError,
    WireboxError,
    WireboxFailedResolveParameterError,
    WireboxInvalidActionNameError,
    WireboxInvalidDefinitionError,
    WireboxNotFoundError,
    WireboxOverwriteExistingServiceError,
    WireboxResolverError,
)
from wirebox.reference import Reference, ref
from wirebox.resolver import Resolver
from wirebox.service_provider import ServiceProvider
from wirebox.settings import ContainerSettings

__all__ = [
    "Container",
    "ContainerProtocol",
    "ContainerSettings",
    "ContextualBindingBuilder",
    "Definition",
    "Factory",
    "MethodInvocation",
    "PropertyAssignment",
    "Reference",
    "Repository",
    "Resolver",
    "ServiceProvider",
    "WireboxAliasNotFoundError",
    "WireboxCircularDependencyError",
    "WireboxContainerError",
    "WireboxDefinitionError",
    "WireboxDefinitionNotFoundError",
    "WireboxError",
    "WireboxFailedResolveParameterError",
    "WireboxInvalidActionNameError",
    "WireboxInvalidDefinitionError",
    "WireboxNotFoundError",
    "WireboxOverwriteExistingServiceError",
    "WireboxResolverError",
    "factory",
    "ref",
]
