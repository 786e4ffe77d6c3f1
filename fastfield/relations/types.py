# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

from dataclasses import dataclass


@dataclass(frozen=True)
class RelationSource:
    """
    The record holding a relation field.

    Links of translatable fields are scoped to the source locale, links of
    other fields are shared by every locale (stored with a NULL locale).
    """

    id: int
    locale: str | None = None
    translatable: bool = False

    @property
    def link_locale(self) -> str | None:
        return self.locale if self.translatable else None


@dataclass(frozen=True)
class RelationLink:
    field_id: int
    source_id: int
    source_locale: str | None
    target_id: int
    sort_order: int


__all__ = [
    "RelationSource",
    "RelationLink",
]
