"""
Explicit entity/DTO mapping registry.

Each (source, target) pair is registered once, by hand, in apps/mappers.py.
Mapping an unregistered pair raises instead of silently returning nothing.
"""

from typing import Any, Callable, Dict, Iterable, List, Tuple, Type, TypeVar
from pydantic import BaseModel

S = TypeVar("S")
D = TypeVar("D")


class MappingNotRegisteredError(LookupError):
    """No mapping function for the requested (source, target) pair."""


class MappingRegistry:
    def __init__(self):
        self._mappings: Dict[Tuple[type, type], Callable[[Any], Any]] = {}

    def register(self, source: Type[S], target: Type[D]):
        """Decorator: register fn(source_obj) -> target_obj."""
        def decorator(fn: Callable[[S], D]) -> Callable[[S], D]:
            pair = (source, target)
            if pair in self._mappings:
                raise ValueError(f"Mapping {source.__name__} -> {target.__name__} already registered")
            self._mappings[pair] = fn
            return fn
        return decorator

    def has(self, source: type, target: type) -> bool:
        return (source, target) in self._mappings

    def map(self, obj: Any, target: Type[D]) -> D:
        fn = self._mappings.get((type(obj), target))
        if fn is None:
            raise MappingNotRegisteredError(
                f"No mapping registered for {type(obj).__name__} -> {target.__name__}"
            )
        return fn(obj)

    def map_many(self, objs: Iterable[Any], target: Type[D]) -> List[D]:
        return [self.map(obj, target) for obj in objs]


def copy_fields(source: Any, target: Type[D], exclude: Iterable[str] = (), **overrides) -> D:
    """
    Build `target` from the same-named fields of `source`.

    Only fields declared on `target` are copied; `exclude` drops fields and
    `overrides` sets values explicitly.
    """
    skip = set(exclude)
    fields = target.model_fields if issubclass(target, BaseModel) else {}
    data = {
        name: getattr(source, name)
        for name in fields
        if name not in skip and name not in overrides and hasattr(source, name)
    }
    data.update(overrides)
    return target(**data)


mapper = MappingRegistry()
