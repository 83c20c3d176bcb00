"""
Service types and the caller-owned registry of custom types.

Built-in types carry a fixed margin. Custom types declare their own margin
and whether the per-appointment retouching surcharge applies.
"""
import math
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from .errors import InvalidServiceType


@dataclass(frozen=True)
class ServiceType:
    """A priced service category."""
    name: str
    margin: float
    requires_retouching: bool = False
    builtin: bool = False

    @classmethod
    def custom(cls, name: str, margin: float = 25.0, requires_retouching: bool = False) -> 'ServiceType':
        """Create a custom (non built-in) service type."""
        return cls(name=name, margin=float(margin), requires_retouching=requires_retouching)

    def __str__(self) -> str:
        return self.name


MASSAGE_SPA = ServiceType("massage/spa", 25.0, requires_retouching=False, builtin=True)
HAIR_NAILS = ServiceType("hair/nails", 25.0, requires_retouching=False, builtin=True)
HEADSHOT = ServiceType("headshot", 20.0, requires_retouching=True, builtin=True)

BUILTIN_SERVICE_TYPES = {st.name: st for st in (MASSAGE_SPA, HAIR_NAILS, HEADSHOT)}

ServiceTypeRef = Union[ServiceType, str]


def service_type_name(service_type: ServiceTypeRef) -> str:
    """Name of a service type given either the type or its name."""
    if isinstance(service_type, ServiceType):
        return service_type.name
    return str(service_type)


class ServiceTypeRegistry:
    """
    Registry of service types known to an engine.

    Built-ins are always present. Custom types are added at runtime by the
    owner of the registry and looked up by name.
    """

    def __init__(self, default_margin: float = 25.0):
        self.default_margin = default_margin
        self._custom: dict[str, ServiceType] = {}

    def register(
        self,
        name: str,
        margin: Optional[float] = None,
        requires_retouching: bool = False,
    ) -> ServiceType:
        """
        Register (or replace) a custom service type.

        Raises InvalidServiceType for empty names, names that collide with a
        built-in, or margins outside [0, 100).
        """
        name = str(name).strip() if name is not None else ""
        if not name:
            raise InvalidServiceType(
                "Service type name must not be empty",
                field="service_type", constraint="non-empty name", value=name,
            )
        if name in BUILTIN_SERVICE_TYPES:
            raise InvalidServiceType(
                f"Cannot override built-in service type: {name}",
                field="service_type", constraint="not a built-in name", value=name,
            )

        margin = self.default_margin if margin is None else margin
        if isinstance(margin, bool) or not isinstance(margin, (int, float)) \
                or not math.isfinite(margin) or not 0 <= margin < 100:
            raise InvalidServiceType(
                f"Margin for {name} must be in [0, 100), got {margin}",
                field="margin", constraint="0 <= margin < 100", value=margin,
            )

        service_type = ServiceType.custom(name, margin, bool(requires_retouching))
        self._custom[name] = service_type
        return service_type

    def unregister(self, name: str):
        """Remove a custom service type."""
        if name not in self._custom:
            raise InvalidServiceType(
                f"Unknown custom service type: {name}",
                field="service_type", constraint="registered custom type", value=name,
            )
        del self._custom[name]

    def resolve(self, service_type: ServiceTypeRef) -> ServiceType:
        """Return the registered ServiceType for a name or type."""
        if isinstance(service_type, ServiceType):
            known = self.get(service_type.name)
            if known is None or known != service_type:
                raise InvalidServiceType(
                    f"Invalid service type: {service_type.name}",
                    field="service_type", constraint="built-in or registered custom type",
                    value=service_type.name,
                )
            return known

        known = self.get(service_type) if isinstance(service_type, str) else None
        if known is None:
            raise InvalidServiceType(
                f"Invalid service type: {service_type}",
                field="service_type", constraint="built-in or registered custom type",
                value=service_type,
            )
        return known

    def get(self, name: str) -> Optional[ServiceType]:
        """Look up a type by name, or None."""
        return BUILTIN_SERVICE_TYPES.get(name) or self._custom.get(name)

    def names(self) -> list[str]:
        """All known type names, built-ins first."""
        return list(BUILTIN_SERVICE_TYPES) + list(self._custom)

    def __contains__(self, service_type) -> bool:
        return self.get(service_type_name(service_type)) is not None

    def __iter__(self) -> Iterator[ServiceType]:
        yield from BUILTIN_SERVICE_TYPES.values()
        yield from self._custom.values()
