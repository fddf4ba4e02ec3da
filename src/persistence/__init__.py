"""Persistence boundary: adapter contract, wire mappers and backends."""

from pagecraft.persistence.base import (
    CollectionRef,
    PersistenceAdapter,
    SavedDocument,
    SaveMode,
)
from pagecraft.persistence.local import JsonFileAdapter
from pagecraft.persistence.mappers import (
    FlatSuffixMapper,
    LocalizationMapper,
    NestedMapper,
    TranslationsMapper,
    create_mapper,
)
from pagecraft.persistence.rest import RestAdapter, RestClient

__all__ = [
    "CollectionRef",
    "FlatSuffixMapper",
    "JsonFileAdapter",
    "LocalizationMapper",
    "NestedMapper",
    "PersistenceAdapter",
    "RestAdapter",
    "RestClient",
    "SaveMode",
    "SavedDocument",
    "TranslationsMapper",
    "create_mapper",
]
