from .dependencies import DependencyStore, InMemoryDependencyStore, JsonFileDependencyStore, SqliteDependencyStore
from .messages import InMemoryMessageBlobStore, JsonFileMessageBlobStore, MessageBlobStore

__all__ = [
    "DependencyStore",
    "InMemoryDependencyStore",
    "InMemoryMessageBlobStore",
    "JsonFileDependencyStore",
    "JsonFileMessageBlobStore",
    "MessageBlobStore",
    "SqliteDependencyStore",
]
