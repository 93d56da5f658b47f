"""Template strings for tags, commit messages and target options.

Placeholders use the ``{{name}}`` syntax. Names missing from the context
are left in place verbatim.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Union

Scalar = Union[str, int, float, bool, None]
OptionNode = Union[Scalar, list["OptionNode"], dict[str, "OptionNode"]]

_PLACEHOLDER_RE = re.compile(r"\{\{\s*(?P<name>[\w.-]+)\s*\}\}")
_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?$")

DEFAULT_COMMIT_MESSAGE_FORMAT = "chore({{projectName}}): release version {{version}}"
DEFAULT_TAG_PREFIX = "{{projectName}}-"
DEFAULT_SYNC_TAG_PREFIX = "v"


def render(template: str, context: Mapping[str, Any]) -> str:
    """Substitute ``{{name}}`` tokens with stringified context values.

    Examples:
        render("{{projectName}}-", {"projectName": "api"}) → "api-"
        render("{{unknown}}", {}) → "{{unknown}}"
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group("name")
        if name not in context:
            return match.group(0)
        value = context[name]
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    return _PLACEHOLDER_RE.sub(_replace, template)


def coerce(text: str) -> str | int | float | bool:
    """Convert rendered text back to the most specific scalar type.

    Examples:
        coerce("true") → True
        coerce("42") → 42
        coerce("1.5") → 1.5
        coerce("2.1.0") → "2.1.0"
    """
    if text == "true":
        return True
    if text == "false":
        return False
    if _INT_RE.match(text):
        return int(text)
    if _FLOAT_RE.match(text):
        return float(text)
    return text


def _resolve_scalar(value: Scalar, context: Mapping[str, Any]) -> Scalar:
    if value is None:
        return None
    if isinstance(value, bool):
        value = "true" if value else "false"
    return coerce(render(str(value), context))


def resolve_node(node: OptionNode, context: Mapping[str, Any]) -> OptionNode:
    if isinstance(node, Mapping):
        return {key: resolve_node(value, context) for key, value in node.items()}
    if isinstance(node, list | tuple):
        return [resolve_node(element, context) for element in node]
    return _resolve_scalar(node, context)


def resolve_options(
    options: Mapping[str, OptionNode] | None, context: Mapping[str, Any]
) -> dict[str, OptionNode]:
    """Resolve every template in an option tree, returning a new tree.

    Mappings are resolved key by key (order preserved), sequences element
    by element, and scalar leaves are rendered then coerced. The input tree
    is not modified.

    Example:
        resolve_options({"retries": "{{n}}", "tags": ["v{{version}}"]},
                        {"n": 3, "version": "1.0.0"})
        → {"retries": 3, "tags": ["v1.0.0"]}
    """
    return {key: resolve_node(value, context) for key, value in (options or {}).items()}


def format_tag_prefix(
    *, version_tag_prefix: str | None, project_name: str, sync_versions: bool
) -> str:
    if version_tag_prefix is not None:
        return render(version_tag_prefix, {"projectName": project_name})
    if sync_versions:
        return DEFAULT_SYNC_TAG_PREFIX
    return render(DEFAULT_TAG_PREFIX, {"projectName": project_name})


def format_tag(*, tag_prefix: str, version: str) -> str:
    return f"{tag_prefix}{version}"


def format_commit_message(
    *, project_name: str, commit_message_format: str | None, version: str
) -> str:
    return render(
        commit_message_format or DEFAULT_COMMIT_MESSAGE_FORMAT,
        {"projectName": project_name, "version": version},
    )
