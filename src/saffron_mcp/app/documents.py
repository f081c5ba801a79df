"""
GraphQL operation descriptors.

Each operation the server sends is written as GraphQL source text in
``operations.py`` and parsed once, at import time, into an ``Operation``.
Parsing up front means a typo in a document fails at startup instead of on
the first tool call.
"""

from dataclasses import dataclass
from typing import Optional

from graphql import DocumentNode, OperationDefinitionNode, parse, print_ast


@dataclass(frozen=True)
class Operation:
    """A parsed GraphQL document holding one named query or mutation."""

    name: Optional[str]
    document: DocumentNode
    source: str

    @classmethod
    def parse(cls, source: str) -> "Operation":
        document = parse(source)
        name = None
        for definition in document.definitions:
            if isinstance(definition, OperationDefinitionNode) and definition.name:
                name = definition.name.value
                break
        return cls(name=name, document=document, source=print_ast(document))

    def payload(self, variables: Optional[dict] = None) -> dict:
        """Build the JSON body of a GraphQL-over-HTTP request."""
        body = {"query": self.source, "variables": variables or {}}
        if self.name:
            body["operationName"] = self.name
        return body
