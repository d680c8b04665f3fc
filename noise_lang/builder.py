import logging

from .exceptions import ArgumentCountMismatch, DuplicateIdentifier, InvalidParameter
from .models import Assignment
from .modules import ModuleError, create_module
from .registry import ModuleNode, StagedGraph
from .schema import ModuleKind, schema_for

logger = logging.getLogger(__name__)


def build_node(graph: StagedGraph, statement: Assignment) -> ModuleNode:
    """Construct the node an Assignment declares and wire its source slots.

    Every check runs before the instance exists, so a rejected statement
    leaves nothing behind even in the staged copy.
    """
    kind = ModuleKind(statement.kind)
    if statement.identifier in graph:
        raise DuplicateIdentifier(
            f"Identifier '{statement.identifier}' is already declared"
        )
    sources = [graph.require(name) for name in statement.arguments]

    expected = schema_for(kind).source_count
    if len(sources) != expected:
        raise ArgumentCountMismatch(
            f"Invalid number of arguments to module '{kind.value}': "
            f"expected {expected}, got {len(sources)}"
        )

    instance = create_module(kind.value)
    try:
        for slot, source in enumerate(sources):
            instance.set_source_module(slot, source.instance)
    except ModuleError as e:
        raise InvalidParameter(str(e)) from e

    node = ModuleNode(statement.identifier, kind, instance)
    graph.add(node)
    logger.debug(
        "declared %s = %s(%s)",
        node.identifier,
        kind.value,
        ", ".join(statement.arguments),
    )
    return node
