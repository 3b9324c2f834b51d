"""Typed access to loosely-typed create-container request documents.

Brief:
  Request bodies arrive as arbitrary JSON. The helpers here are lenient on
  absence (a missing or null key yields an empty value) and strict on type
  (a present key holding the wrong shape raises WrongTypeError naming the
  key). Everything that reads the request document goes through them.

Inputs:
  - Parsed JSON mappings (``dict[str, Any]``).

Outputs:
  - Typed values, or WrongTypeError / MissingFieldError.
"""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from .errors import MalformedBodyError, MissingFieldError, WrongTypeError

JSONObject = Dict[str, Any]


def parse_body(body: bytes) -> JSONObject:
    """Brief: Decode a request body into a JSON object.

    Inputs:
      - body: Raw request body bytes (an empty body decodes to ``{}``).

    Outputs:
      - dict: The decoded document.

    Raises:
      - MalformedBodyError: body is not valid JSON.
      - WrongTypeError: body decodes to something other than an object.
    """

    if not body or not body.strip():
        return {}
    try:
        doc = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedBodyError(f"Malformed request body: {exc}") from exc
    if not isinstance(doc, dict):
        raise WrongTypeError("<body>", "object", doc)
    return doc


def serialize_body(doc: JSONObject) -> bytes:
    """Encode a document back into a request body."""
    return json.dumps(doc, separators=(",", ":")).encode("utf-8")


def lookup_object(doc: JSONObject, key: str) -> JSONObject:
    """Brief: Return the nested mapping stored under ``key``.

    Inputs:
      - doc: Parent mapping.
      - key: Key to read.

    Outputs:
      - dict: The nested mapping. When the key is missing or null a new empty
        mapping is stored under ``key`` and returned, so callers can mutate
        it in place.

    Example:
        >>> doc = {}
        >>> lookup_object(doc, "HostConfig")["Dns"] = ["10.0.0.1"]
        >>> doc
        {'HostConfig': {'Dns': ['10.0.0.1']}}
    """

    value = doc.get(key)
    if value is None:
        value = {}
        doc[key] = value
        return value
    if not isinstance(value, dict):
        raise WrongTypeError(key, "object", value)
    return value


def lookup_string(doc: JSONObject, key: str) -> str:
    """Return ``doc[key]`` as a string, or "" when missing or null."""
    value = doc.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise WrongTypeError(key, "string", value)
    return value


def require_string(doc: JSONObject, key: str) -> str:
    """Like lookup_string, but an absent or empty value raises MissingFieldError."""
    value = lookup_string(doc, key)
    if not value:
        raise MissingFieldError(key)
    return value


def lookup_string_array(doc: JSONObject, key: str) -> List[str]:
    """Brief: Return ``doc[key]`` as a list of strings.

    Inputs:
      - doc: Mapping to read from.
      - key: Key to read.

    Outputs:
      - list[str]: A new list. Missing or null yields ``[]``; a bare string
        yields a one-element list.

    Raises:
      - WrongTypeError: the value is neither a string nor an array of strings.
    """

    value = doc.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    raise WrongTypeError(key, "array of strings", value)


class CommandForm(enum.Enum):
    """Shapes an Entrypoint or Cmd value may take in a request."""

    ABSENT = "absent"
    STRING = "string"
    ARRAY = "array"


@dataclass(frozen=True)
class CommandValue:
    """Brief: Normalized Entrypoint/Cmd value.

    A request may carry these fields as a single string, an array of strings,
    or not at all. The raw value is classified once here and everything
    downstream works on ``args``.

    Example:
        >>> CommandValue.parse("Entrypoint", "run.sh").args
        ('run.sh',)
        >>> CommandValue.parse("Entrypoint", ["run.sh"]).args
        ('run.sh',)
        >>> CommandValue.parse("Entrypoint", None).form
        <CommandForm.ABSENT: 'absent'>
    """

    form: CommandForm
    args: Tuple[str, ...] = field(default=())

    @classmethod
    def parse(cls, name: str, raw: Any) -> "CommandValue":
        if raw is None:
            return cls(CommandForm.ABSENT)
        if isinstance(raw, str):
            return cls(CommandForm.STRING, (raw,))
        if isinstance(raw, list):
            for item in raw:
                if not isinstance(item, str):
                    raise WrongTypeError(name, "string or array of strings", raw)
            return cls(CommandForm.ARRAY, tuple(raw))
        raise WrongTypeError(name, "string or array of strings", raw)

    @classmethod
    def from_document(cls, doc: JSONObject, key: str) -> "CommandValue":
        return cls.parse(key, doc.get(key))

    def __bool__(self) -> bool:
        return bool(self.args)

    def starts_with(self, prefix: Tuple[str, ...]) -> bool:
        return bool(prefix) and self.args[: len(prefix)] == tuple(prefix)
