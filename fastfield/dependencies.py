# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

"""
Service registry shared by the fastfield components.

Services are registered under a class or a Token and resolved on demand:

    register_service(BaseSettings(), BaseSettings)
    settings = get_service(BaseSettings)

Registered classes are instantiated once, with the constructor parameters
annotated with a registered service type injected.
"""

import inspect

from typing import Any, Callable, Generic, Type, TypeVar, Union, get_type_hints


T = TypeVar("T")


class Token(Generic[T]):
    """Registry key for services that are not identified by their class."""

    def __init__(self, key: Union[str, Type[Any]]):
        self.key = key
        self.name = key if isinstance(key, str) else key.__name__

    def __repr__(self):
        return f"Token({self.name!r})"

    def __hash__(self):
        return hash((Token, self.key))

    def __eq__(self, other):
        return isinstance(other, Token) and other.key == self.key


ServiceKey = Union[Type[T], Token[T], str]


_services: dict[Token[Any], Any] = {}
_instances: dict[Token[Any], Any] = {}


def register_service(
    service: Union[T, Type[T]],
    key: ServiceKey[T] | None = None,
    force: bool = False,
) -> None:
    """
    Register a service instance, or a class resolved on first use.

    An instance registered under an explicit key is also reachable through its
    own class, unless that class already has a service.
    """
    own_key = _token(service if inspect.isclass(service) else type(service))
    token = own_key if key is None else _token(key)

    _store(token, service, force)

    if key is not None and not inspect.isclass(service):
        _store(own_key, service, False)


def unregister_service(key: ServiceKey[Any]) -> None:
    token = _token(key)
    _services.pop(token, None)
    _instances.pop(token, None)


def has_service(key: ServiceKey[Any]) -> bool:
    return _token(key) in _services


def get_service(key: ServiceKey[T]) -> T:
    """
    Return the service registered under the key.

    Unregistered classes are registered on the fly.

    Raises:
        LookupError: If nothing is registered under a Token or a name
    """
    token = _token(key)

    if token not in _services and inspect.isclass(key):
        register_service(key)

    if token not in _services:
        raise LookupError(f"Service {token.name} is not registered")

    service = _services[token]

    if not inspect.isclass(service):
        return service

    if token not in _instances:
        _instances[token] = service(**_constructor_services(service))

    return _instances[token]


def provide(key: ServiceKey[T]) -> Callable[[], T]:
    """Return a factory resolving the service each time it is called."""

    def factory() -> T:
        return get_service(key)

    return factory


def clear_services() -> None:
    _services.clear()
    _instances.clear()


def _token(key: ServiceKey[Any]) -> Token[Any]:
    return key if isinstance(key, Token) else Token(key)


def _store(token: Token[Any], service: Any, force: bool) -> None:
    if force or token not in _services:
        _services[token] = service
        _instances.pop(token, None)


def _constructor_services(service_class: type) -> dict[str, Any]:
    """Map the constructor parameters typed with a registered service to that service."""
    try:
        hints = get_type_hints(service_class.__init__)
    except (NameError, TypeError):
        hints = {}

    kwargs = {}

    for name, param in inspect.signature(service_class.__init__).parameters.items():
        if name == "self" or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue

        hint = hints.get(name)

        if inspect.isclass(hint) and has_service(hint):
            kwargs[name] = get_service(hint)

    return kwargs


__all__ = [
    "Token",
    "ServiceKey",
    "register_service",
    "unregister_service",
    "has_service",
    "get_service",
    "provide",
    "clear_services",
]
