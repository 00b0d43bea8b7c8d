"""Environment bindings and service-discovery variable naming.

A binding is filled at registration time from values that only depend on
registration inputs.  Materialization copies it into the overlay handed to
the process supervisor; after the first materialization the binding is
sealed and further writes raise.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from src.app_host.exceptions import AppHostError

GODOT_PROJECT_PATH = "GODOT_PROJECT_PATH"
GODOT_PROJECT_DIR = "GODOT_PROJECT_DIR"


class EnvironmentBinding(Mapping[str, str]):
    """Name -> value mapping attached to exactly one resource."""

    def __init__(self, resource: str, values: Mapping[str, str] | None = None) -> None:
        self.resource = resource
        self._values: dict[str, str] = dict(values or {})
        self._sealed = False

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"EnvironmentBinding({self.resource!r}, {self._values!r})"

    @property
    def sealed(self) -> bool:
        return self._sealed

    def set(self, key: str, value: str) -> None:
        if self._sealed:
            raise AppHostError(
                f"Environment of resource '{self.resource}' is already materialized"
            )
        self._values[key] = str(value)

    def materialize(self) -> dict[str, str]:
        """Seal the binding and return a copy of its values."""
        self._sealed = True
        return dict(self._values)


def service_discovery_variables(
    target: str, endpoints: Iterable[tuple[str, str]]
) -> dict[str, str]:
    """Build ``services__<target>__<scheme>__<index>`` variables.

    Indexes count per scheme, in endpoint registration order.
    """
    result: dict[str, str] = {}
    counters: dict[str, int] = {}
    for scheme, url in endpoints:
        index = counters.get(scheme, 0)
        counters[scheme] = index + 1
        result[f"services__{target}__{scheme}__{index}"] = url
    return result


def connection_string_variable(target: str) -> str:
    return f"ConnectionStrings__{target}"
