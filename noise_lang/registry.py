"""Module registry with copy-on-write graph revisions.

Readers (the preview renderer, the checker, tests) take the latest published
``GraphRevision`` and keep using it for as long as they like; it never changes
under them. Writers stage a private copy inside ``transaction()`` and the copy
only becomes visible when the block exits without raising.
"""

import copy
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

from .exceptions import DuplicateIdentifier, UnknownIdentifierReference
from .modules import Module
from .schema import ModuleKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModuleNode:
    identifier: str
    kind: ModuleKind
    instance: Module


class _GraphView:
    _nodes: Mapping[str, ModuleNode]
    output: Optional[str]

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._nodes

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def get(self, identifier: str) -> Optional[ModuleNode]:
        return self._nodes.get(identifier)

    def require(self, identifier: str) -> ModuleNode:
        node = self._nodes.get(identifier)
        if node is None:
            raise UnknownIdentifierReference(f"Unknown identifier '{identifier}'")
        return node

    def identifiers(self) -> Tuple[str, ...]:
        return tuple(self._nodes)

    def wiring(self, identifier: str) -> Tuple[Optional[str], ...]:
        """Identifiers currently feeding each source slot of a node."""
        names = {id(n.instance): n.identifier for n in self._nodes.values()}
        return tuple(
            None if src is None else names.get(id(src))
            for src in self.require(identifier).instance.sources
        )

    def reaches(self, start: str, target: str) -> bool:
        """True when ``target`` is ``start`` or one of its transitive sources."""
        goal = self.require(target).instance
        pending = [self.require(start).instance]
        seen = set()
        while pending:
            module = pending.pop()
            if module is goal:
                return True
            if id(module) in seen:
                continue
            seen.add(id(module))
            pending.extend(src for src in module.sources if src is not None)
        return False


class GraphRevision(_GraphView):
    """An immutable, published state of the module graph."""

    def __init__(
        self,
        nodes: Mapping[str, ModuleNode],
        generation: int = 0,
        output: Optional[str] = None,
    ):
        self._nodes = MappingProxyType(dict(nodes))
        self.generation = generation
        self.output = output

    def __repr__(self) -> str:
        return (
            f"GraphRevision(generation={self.generation}, "
            f"nodes={list(self._nodes)}, output={self.output!r})"
        )


class StagedGraph(_GraphView):
    """A private, writable copy of a revision used inside a transaction."""

    def __init__(self, nodes: Dict[str, ModuleNode], output: Optional[str]):
        self._nodes = nodes
        self.output = output

    def add(self, node: ModuleNode) -> None:
        if node.identifier in self._nodes:
            raise DuplicateIdentifier(
                f"Identifier '{node.identifier}' is already declared"
            )
        self._nodes[node.identifier] = node


class ModuleRegistry:
    def __init__(self):
        self._lock = threading.Lock()
        self._writer = threading.Lock()
        self._revision = GraphRevision({})

    @property
    def revision(self) -> GraphRevision:
        with self._lock:
            return self._revision

    def snapshot(self) -> GraphRevision:
        return self.revision

    @contextmanager
    def transaction(self, deep: bool = False) -> Iterator[StagedGraph]:
        """Stage a copy of the latest revision and publish it on success.

        A shallow stage shares every existing instance and may only add
        nodes or rebind the output. A deep stage copies the whole graph so
        existing instances can be mutated in private.
        """
        with self._writer:
            base = self.revision
            nodes = dict(base._nodes)
            if deep:
                nodes = copy.deepcopy(nodes)
            staged = StagedGraph(nodes, base.output)
            yield staged
            published = GraphRevision(staged._nodes, base.generation + 1, staged.output)
            with self._lock:
                self._revision = published
            logger.debug("published revision %d (%d nodes)", published.generation, len(published))

    def reset(self) -> None:
        with self._writer:
            with self._lock:
                self._revision = GraphRevision({}, self._revision.generation + 1)
            logger.debug("registry reset")
