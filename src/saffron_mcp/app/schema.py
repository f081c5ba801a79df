"""
Tool input schemas.

An ``InputSchema`` does two jobs for a tool: it publishes the JSON schema
MCP clients see, and it turns the raw arguments of a call into the
GraphQL variables of the operation. Validation and coercion happen in one
step, ``validate()``, which returns either ``Valid`` with the variables or
``Invalid`` with pydantic's structured error list.

Three kinds of schema exist:

  - ``ModelSchema``: a pydantic model; variables are its JSON dump, so
    field serializers (e.g. instruction encoding) apply.
  - ``ChoiceSchema``: one argument restricted to a set of display names,
    sent to the API as the identifier the name maps to.
  - ``IntersectionSchema``: several schemas validated against the same
    arguments, with their variables merged. Built with ``a & b``.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Mapping, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError, create_model


@dataclass(frozen=True)
class Valid:
    variables: Dict[str, Any]


@dataclass(frozen=True)
class Invalid:
    errors: List[Dict[str, Any]]

    def message(self) -> str:
        return json.dumps(self.errors, ensure_ascii=False)


ValidationOutcome = Union[Valid, Invalid]


def _errors(exc: ValidationError) -> List[Dict[str, Any]]:
    # Round-trip through JSON so error contexts holding exceptions become strings.
    return json.loads(exc.json(include_url=False))


class InputSchema:
    """Base class for tool input schemas."""

    def json_schema(self) -> Dict[str, Any]:
        raise NotImplementedError

    def validate(self, arguments: Mapping[str, Any]) -> ValidationOutcome:
        raise NotImplementedError

    def __and__(self, other: "InputSchema") -> "IntersectionSchema":
        return IntersectionSchema(self, other)


class ModelSchema(InputSchema):
    """Schema backed by a pydantic model whose fields are the tool arguments."""

    def __init__(self, model: Type[BaseModel]):
        self.model = model

    def json_schema(self) -> Dict[str, Any]:
        schema = self.model.model_json_schema()
        schema.pop("title", None)
        return schema

    def validate(self, arguments: Mapping[str, Any]) -> ValidationOutcome:
        try:
            value = self.model.model_validate(dict(arguments))
        except ValidationError as exc:
            return Invalid(_errors(exc))
        return Valid(value.model_dump(mode="json", by_alias=True, exclude_none=True))


class _Arguments(BaseModel):
    model_config = ConfigDict(extra="ignore")


def fields(**definitions: Any) -> ModelSchema:
    """
    Build a schema from field definitions, in ``pydantic.create_model`` form.

    Example::

        fields(id=(str, Field(description="The recipe ID")))
    """
    return ModelSchema(create_model("Arguments", __base__=_Arguments, **definitions))


NO_ARGUMENTS = fields()


class ChoiceSchema(InputSchema):
    """
    One argument chosen from display names, sent as the matching identifier.

    Args:
        argument:  Name of the tool argument (e.g. "sectionName").
        variable:  Name of the GraphQL variable (e.g. "menuSectionId").
        choices:   Display name → identifier.
        description: Argument description shown to clients.
    """

    def __init__(
        self,
        argument: str,
        variable: str,
        choices: Mapping[str, str],
        description: Optional[str] = None,
    ):
        if not choices:
            raise ValueError(f"{argument} needs at least one choice")
        self.argument = argument
        self.variable = variable
        self.choices = dict(choices)
        self.description = description
        self._adapter = TypeAdapter(Literal[tuple(self.choices)])

    def json_schema(self) -> Dict[str, Any]:
        prop: Dict[str, Any] = {"type": "string", "enum": list(self.choices)}
        if self.description:
            prop["description"] = self.description
        return {
            "type": "object",
            "properties": {self.argument: prop},
            "required": [self.argument],
        }

    def validate(self, arguments: Mapping[str, Any]) -> ValidationOutcome:
        if self.argument not in arguments:
            return Invalid(
                [{"type": "missing", "loc": [self.argument], "msg": "Field required", "input": None}]
            )
        try:
            name = self._adapter.validate_python(arguments[self.argument])
        except ValidationError as exc:
            errors = _errors(exc)
            for error in errors:
                error["loc"] = [self.argument, *error.get("loc", [])]
            return Invalid(errors)
        return Valid({self.variable: self.choices[name]})


class IntersectionSchema(InputSchema):
    """All parts must accept the arguments; their variables are merged in order."""

    def __init__(self, *parts: InputSchema):
        flattened: List[InputSchema] = []
        for part in parts:
            if isinstance(part, IntersectionSchema):
                flattened.extend(part.parts)
            else:
                flattened.append(part)
        self.parts = flattened

    def json_schema(self) -> Dict[str, Any]:
        merged: Dict[str, Any] = {"type": "object", "properties": {}, "required": []}
        definitions: Dict[str, Any] = {}
        for part in self.parts:
            schema = part.json_schema()
            merged["properties"].update(schema.get("properties", {}))
            for name in schema.get("required", []):
                if name not in merged["required"]:
                    merged["required"].append(name)
            definitions.update(schema.get("$defs", {}))
        if definitions:
            merged["$defs"] = definitions
        return merged

    def validate(self, arguments: Mapping[str, Any]) -> ValidationOutcome:
        variables: Dict[str, Any] = {}
        errors: List[Dict[str, Any]] = []
        for part in self.parts:
            outcome = part.validate(arguments)
            if isinstance(outcome, Invalid):
                errors.extend(outcome.errors)
            else:
                variables.update(outcome.variables)
        if errors:
            return Invalid(errors)
        return Valid(variables)
