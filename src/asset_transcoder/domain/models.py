"""Core domain models for build output and the chunk graph.

These types mirror what a bundler hands to an optimize-stage hook:
an asset store keyed by output name, a set of chunks each claiming
some of those names, and entrypoints grouping chunks.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

# Metadata key recording the name an asset was converted from
SOURCE_FILENAME_KEY = "source_filename"

# Metadata key recording the encoded size in bytes
SIZE_KEY = "size"


@dataclass(frozen=True)
class Asset:
    """A named build output.

    Content is immutable; replacing it produces a new Asset.
    """

    name: str
    content: bytes
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.content, bytes):
            # bytearray/memoryview would let callers mutate content behind us
            object.__setattr__(self, "content", bytes(self.content))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def size(self) -> int:
        """Content length in bytes."""
        return len(self.content)

    def text(self, encoding: str = "utf-8") -> str:
        """Decode the content as text.

        Raises:
            UnicodeDecodeError: If the content is not valid in ``encoding``.
        """
        return self.content.decode(encoding)


class BuildOutput:
    """Mutable asset store for one build, keyed by output name.

    Operations follow the host vocabulary: ``emit`` adds a new asset,
    ``update`` replaces the content of an existing one and ``delete``
    removes it. Iteration order is insertion order.
    """

    def __init__(self, assets: Mapping[str, bytes | Asset] | None = None) -> None:
        self._assets: dict[str, Asset] = {}
        for name, value in (assets or {}).items():
            if isinstance(value, Asset):
                self._assets[name] = value
            else:
                self._assets[name] = Asset(name=name, content=value)

    def __contains__(self, name: object) -> bool:
        return name in self._assets

    def __getitem__(self, name: str) -> Asset:
        return self._assets[name]

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._assets))

    def __len__(self) -> int:
        return len(self._assets)

    def __repr__(self) -> str:
        return f"BuildOutput({list(self._assets)!r})"

    def get(self, name: str) -> Asset | None:
        """Get an asset by name, or None if absent."""
        return self._assets.get(name)

    def names(self) -> list[str]:
        """Snapshot of the current asset names."""
        return list(self._assets)

    def emit(
        self,
        name: str,
        content: bytes,
        metadata: Mapping[str, Any] | None = None,
    ) -> Asset:
        """Add a new asset.

        Raises:
            KeyError: If an asset with this name already exists.
        """
        if name in self._assets:
            raise KeyError(f"Asset already exists: {name}")
        asset = Asset(name=name, content=content, metadata=metadata or {})
        self._assets[name] = asset
        return asset

    def update(self, name: str, content: bytes) -> Asset:
        """Replace the content of an existing asset, keeping its metadata.

        Raises:
            KeyError: If no asset with this name exists.
        """
        current = self._assets[name]
        asset = Asset(name=name, content=content, metadata=current.metadata)
        self._assets[name] = asset
        return asset

    def delete(self, name: str) -> Asset:
        """Remove an asset and return it.

        Raises:
            KeyError: If no asset with this name exists.
        """
        return self._assets.pop(name)

    def contents(self) -> dict[str, bytes]:
        """Snapshot of name -> content, mainly for comparisons."""
        return {name: asset.content for name, asset in self._assets.items()}


@dataclass(eq=False)
class Chunk:
    """A group of output files produced by the bundler.

    Chunks compare by identity: two chunks with the same id are still
    distinct objects in the graph.
    """

    id: str | int
    name: str | None = None
    files: set[str] = field(default_factory=set)


@dataclass(eq=False)
class Entrypoint:
    """A named root of one or more chunks."""

    name: str
    chunks: list[Chunk] = field(default_factory=list)


@dataclass
class BuildGraph:
    """Chunk and entrypoint membership for one build.

    Passed explicitly to the graph updater. ``lock`` serializes commits
    because the chunk and entrypoint containers are shared by every
    outcome.
    """

    chunks: list[Chunk] = field(default_factory=list)
    entrypoints: dict[str, Entrypoint] = field(default_factory=dict)
    lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    def all_chunks(self) -> list[Chunk]:
        """Graph chunks plus entrypoint chunks, de-duplicated by identity."""
        seen: set[int] = set()
        result: list[Chunk] = []
        for chunk in self.chunks:
            if id(chunk) not in seen:
                seen.add(id(chunk))
                result.append(chunk)
        for chunk in self.entrypoint_chunks():
            if id(chunk) not in seen:
                seen.add(id(chunk))
                result.append(chunk)
        return result

    def entrypoint_chunks(self) -> list[Chunk]:
        """Every chunk reachable from any entrypoint, de-duplicated."""
        seen: set[int] = set()
        result: list[Chunk] = []
        for entry in self.entrypoints.values():
            for chunk in entry.chunks:
                if id(chunk) not in seen:
                    seen.add(id(chunk))
                    result.append(chunk)
        return result

    def chunks_containing(self, file_name: str) -> list[Chunk]:
        """Chunks whose file set lists ``file_name``."""
        return [chunk for chunk in self.all_chunks() if file_name in chunk.files]

    def membership(self) -> dict[str | int, set[str]]:
        """Snapshot of chunk id -> files, mainly for comparisons."""
        return {chunk.id: set(chunk.files) for chunk in self.all_chunks()}
