# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).


class InvalidConfigError(Exception): ...


__all__ = [
    "InvalidConfigError",
]
