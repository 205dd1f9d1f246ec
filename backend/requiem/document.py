"""
Gate documents.

A gate document pairs a logic expression with the requirement definitions
its terminals index into::

    logic: "((0 AND 1) OR 2)"
    requirements:
      - {type: allowlist, addresses: [...]}
      - {type: balance, min: 10}
      - {type: free}

Requirement payloads are opaque here; only their count and order matter.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from .errors import DocumentError
from .logic.parser import ExpressionParser, parse
from .logic.tree import Expression


class GateDocument(BaseModel):
    """Logic string plus the ordered requirement definitions."""

    model_config = ConfigDict(extra="allow")

    logic: str = Field(..., min_length=1, description="Gating logic expression")
    requirements: List[Any] = Field(
        default_factory=list,
        description="Requirement definitions, terminal i refers to entry i",
    )

    _tree: Optional[Expression] = PrivateAttr(default=None)

    @field_validator("logic", mode="before")
    @classmethod
    def coerce_logic(cls, v: Any) -> Any:
        """Accept a bare terminal index, as YAML reads ``logic: 0`` as an int."""
        if isinstance(v, bool):
            raise ValueError("logic must be an expression, not a boolean")
        if isinstance(v, int):
            return str(v)
        return v

    @model_validator(mode="after")
    def check_logic(self, info: ValidationInfo) -> "GateDocument":
        """
        Parse the logic and make sure every terminal has a requirement.

        A ``parser`` in the validation context replaces the default one, so
        callers with their own depth limit validate against it.
        """
        parser: Optional[ExpressionParser] = (info.context or {}).get("parser")
        tree = parser.parse(self.logic) if parser is not None else parse(self.logic)

        count = len(self.requirements)
        missing = sorted(i for i in tree.terminals() if i >= count)
        if missing:
            raise ValueError(
                f"Logic references terminals {missing} but only {count} "
                f"requirement(s) are defined"
            )
        return self

    @property
    def expression(self) -> Expression:
        """The logic tree, parsed with the default depth limit."""
        if self._tree is None:
            self._tree = parse(self.logic)
        return self._tree


def load_document(
    content: Union[str, bytes, Mapping[str, Any]],
    parser: Optional[ExpressionParser] = None,
) -> GateDocument:
    """
    Load a gate document from YAML or JSON text, or from an already decoded mapping.

    Args:
        content: Document text or mapping.
        parser: Parser used to validate the logic (defaults to a parser with
            the default depth limit).

    Raises:
        DocumentError: If the content cannot be decoded or fails validation.
    """
    if isinstance(content, Mapping):
        data = content
    else:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise DocumentError(f"YAML parse error: {e}") from e

    if data is None:
        raise DocumentError("Document is empty")

    if not isinstance(data, Mapping):
        raise DocumentError(
            f"Document must be a mapping, got {type(data).__name__}"
        )

    try:
        return GateDocument.model_validate(dict(data), context={"parser": parser})
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False)
        summary = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'document'}: {err['msg']}"
            for err in errors
        )
        raise DocumentError(
            f"Invalid gate document: {summary}",
            {"errors": [{"loc": list(err["loc"]), "msg": err["msg"]} for err in errors]},
        ) from e
