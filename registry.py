"""
registry.py - Model and enum discovery for a model namespace.

Discovery is pure reflection: it imports every module under the namespace,
collects the pydantic model classes defined there, and closes the set over
composition (field types) and inheritance (bases and subclasses). Enum types
are then gathered from the fields of the discovered models and from the
modules of the namespace itself.

Guarantees:
- each reachable model class appears exactly once
- two runs over an unchanged namespace return equal sets
- a namespace that cannot be scanned raises DiscoveryError, never an empty set
"""

from __future__ import annotations

import importlib
import inspect
import pkgutil
import typing
from enum import Enum
from types import ModuleType
from typing import Any, Iterator, Literal, Union

from pydantic import BaseModel

from errors import DiscoveryError
from logging_config import get_logger
from models import EnumType, ModelType, PolymorphicFamily
from wire import discriminator_of, family_base, qualified_name

logger = get_logger(__name__)


def iter_annotation_types(annotation: Any) -> Iterator[type]:
    """Yield every concrete class mentioned in a type annotation.

    Unwraps Optional, Union, Annotated and generic containers such as
    list[...] and dict[..., ...]. Literal arguments and string forward
    references are skipped.
    """
    if annotation is None or isinstance(annotation, str):
        return
    origin = typing.get_origin(annotation)
    if origin is Literal:
        return
    if origin is not None:
        for arg in typing.get_args(annotation):
            yield from iter_annotation_types(arg)
        return
    if isinstance(annotation, type):
        yield annotation


def is_model_class(candidate: Any) -> bool:
    return (
        isinstance(candidate, type)
        and issubclass(candidate, BaseModel)
        and candidate is not BaseModel
        and not candidate.__module__.startswith("pydantic")
    )


def is_enum_class(candidate: Any) -> bool:
    return (
        isinstance(candidate, type)
        and issubclass(candidate, Enum)
        and candidate.__module__ != "enum"
    )


def describe_model(model_class: type[BaseModel]) -> ModelType:
    """Build the ModelType for one pydantic model class."""
    own_annotations = inspect.get_annotations(model_class)
    field_names = tuple(name for name in own_annotations if name in model_class.model_fields)
    discriminator_field, discriminator_value = discriminator_of(model_class)
    return ModelType(
        qualified_name=qualified_name(model_class),
        model_class=model_class,
        field_names=field_names,
        discriminator_field=discriminator_field,
        discriminator_value=discriminator_value,
    )


def describe_enum(enum_class: type[Enum]) -> EnumType:
    """Build the EnumType for one enum class."""
    return EnumType(qualified_name=qualified_name(enum_class), enum_class=enum_class)


def _import_namespace(namespace: Union[str, ModuleType]) -> list[ModuleType]:
    if isinstance(namespace, ModuleType):
        root = namespace
        name = root.__name__
    else:
        name = str(namespace or "").strip()
        if not name:
            raise DiscoveryError(str(namespace), "namespace name is empty")
        try:
            root = importlib.import_module(name)
        except Exception as exc:
            raise DiscoveryError(name, f"import failed: {type(exc).__name__}: {exc}") from exc

    modules = [root]
    package_path = getattr(root, "__path__", None)
    if package_path is None:
        return modules

    def _on_error(module_name: str) -> None:
        raise DiscoveryError(name, f"cannot scan subpackage '{module_name}'")

    for module_info in pkgutil.walk_packages(package_path, prefix=f"{root.__name__}.", onerror=_on_error):
        try:
            modules.append(importlib.import_module(module_info.name))
        except Exception as exc:
            raise DiscoveryError(
                name,
                f"cannot import '{module_info.name}': {type(exc).__name__}: {exc}",
            ) from exc
    return modules


def _related_models(model_class: type[BaseModel]) -> Iterator[type[BaseModel]]:
    for field_info in model_class.model_fields.values():
        for referenced in iter_annotation_types(field_info.annotation):
            if is_model_class(referenced):
                yield referenced
    for base in model_class.__mro__[1:]:
        if is_model_class(base):
            yield base
    for subclass in model_class.__subclasses__():
        if is_model_class(subclass):
            yield subclass


def discover_model_types(namespace: Union[str, ModuleType]) -> set[ModelType]:
    """Return every model type reachable from the namespace.

    Raises:
        DiscoveryError: when the namespace cannot be imported or holds no models.
    """
    modules = _import_namespace(namespace)
    namespace_name = modules[0].__name__

    roots: list[type[BaseModel]] = []
    for module in modules:
        for value in vars(module).values():
            if is_model_class(value) and value.__module__ == module.__name__:
                roots.append(value)

    if not roots:
        raise DiscoveryError(
            namespace_name,
            f"no pydantic models found in {len(modules)} module(s)",
        )

    seen: set[type[BaseModel]] = set()
    pending = list(roots)
    while pending:
        model_class = pending.pop()
        if model_class in seen:
            continue
        seen.add(model_class)
        pending.extend(related for related in _related_models(model_class) if related not in seen)

    model_types = {describe_model(model_class) for model_class in seen}
    logger.info(
        "discovery_models | namespace=%s | modules=%s | roots=%s | models=%s",
        namespace_name,
        len(modules),
        len(roots),
        len(model_types),
    )
    return model_types


def _in_namespace(module_name: str, namespace_name: str) -> bool:
    return module_name == namespace_name or module_name.startswith(f"{namespace_name}.")


def discover_namespace_enums(namespace: Union[str, ModuleType]) -> set[EnumType]:
    """Return every enum defined at module level anywhere under the namespace.

    Raises:
        DiscoveryError: when the namespace cannot be imported.
    """
    modules = _import_namespace(namespace)
    namespace_name = modules[0].__name__

    enum_classes: dict[type[Enum], None] = {}
    for module in modules:
        for value in vars(module).values():
            if is_enum_class(value) and _in_namespace(value.__module__, namespace_name):
                enum_classes.setdefault(value, None)

    enum_types = {describe_enum(enum_class) for enum_class in enum_classes}
    logger.debug("discovery_namespace_enums | namespace=%s | enums=%s", namespace_name, len(enum_types))
    return enum_types


def discover_enum_types(
    model_types: typing.Iterable[ModelType],
    namespace: Union[str, ModuleType, None] = None,
) -> set[EnumType]:
    """Return every enum referenced by a field of, or nested in, the given models.

    With a namespace, enums defined in its modules are included as well, so an
    enum no field refers to is still checked.
    """
    enum_classes: dict[type[Enum], None] = {}
    if namespace is not None:
        for enum_type in discover_namespace_enums(namespace):
            enum_classes.setdefault(enum_type.enum_class, None)
    for model_type in model_types:
        model_class = model_type.model_class
        for field_info in model_class.model_fields.values():
            for referenced in iter_annotation_types(field_info.annotation):
                if is_enum_class(referenced):
                    enum_classes.setdefault(referenced, None)
        for value in vars(model_class).values():
            if is_enum_class(value):
                enum_classes.setdefault(value, None)

    enum_types = {describe_enum(enum_class) for enum_class in enum_classes}
    logger.info("discovery_enums | enums=%s", len(enum_types))
    return enum_types


def discover_families(model_types: typing.Iterable[ModelType]) -> list[PolymorphicFamily]:
    """Group polymorphic variants into families, ordered by base name.

    Raises:
        DiscoveryError: when two variants of one family share a discriminator value.
    """
    grouped: dict[str, dict[str, Any]] = {}
    for model_type in sorted(model_types, key=lambda item: item.qualified_name):
        if not model_type.is_polymorphic or model_type.discriminator_value is None:
            continue
        base = qualified_name(family_base(model_type.model_class))
        entry = grouped.setdefault(
            base,
            {"field": model_type.discriminator_field, "variants": {}},
        )
        variants = entry["variants"]
        if model_type.discriminator_value in variants:
            raise DiscoveryError(
                base,
                f"discriminator value '{model_type.discriminator_value}' is used by "
                f"{variants[model_type.discriminator_value]} and {model_type.qualified_name}",
            )
        variants[model_type.discriminator_value] = model_type.qualified_name

    families = [
        PolymorphicFamily(base=base, discriminator_field=entry["field"], variants=entry["variants"])
        for base, entry in sorted(grouped.items())
    ]
    logger.debug("discovery_families | families=%s", len(families))
    return families
