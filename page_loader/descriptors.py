"""
================================================================================
YAML Page Descriptors
================================================================================

Loads page descriptors from YAML so locators can live next to configuration
instead of in code.

File layout:

    pages:
      login:
        target: /login
        verify:
          title: Login
        fields:
          email: name=email                      # strategy=value shorthand
          password: {name: password}             # one strategy key
          submit: {css: "input[type=submit]", cached: true}
          form_inputs: {tag: input, scope: form, many: true}
          form: {locator: "css=form#login"}

Supported ``verify`` keys (at most one):
    title, title_contains, url_contains, element, property: {name, value}

================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from loguru import logger

from .exceptions import InvalidLocatorError, InvalidPageDescriptorError
from .locator import STRATEGY_ALIASES, Locator
from .page_loader import (
    DocumentPropertyEquals,
    ElementPresent,
    FieldSpec,
    PageDescriptor,
    TitleContains,
    TitleEquals,
    UrlContains,
    Verification,
)


FIELD_OPTIONS = ("cached", "scope", "many")


def _locator_from(value: Any, where: str) -> Locator:
    """Build a Locator from ``"strategy=value"`` or ``{strategy: value}``."""
    try:
        if isinstance(value, str):
            return Locator.parse(value)
        if isinstance(value, dict):
            if "locator" in value:
                return Locator.parse(value["locator"])
            strategies = [k for k in value if k in STRATEGY_ALIASES]
            if len(strategies) != 1:
                raise InvalidPageDescriptorError(
                    f"{where}: expected exactly one locator strategy, got {strategies or 'none'}"
                )
            return Locator(strategies[0], value[strategies[0]])
    except InvalidLocatorError as e:
        raise InvalidPageDescriptorError(f"{where}: {e}") from e
    raise InvalidPageDescriptorError(f"{where}: cannot build a locator from {value!r}")


def _field_from(value: Any, where: str) -> FieldSpec:
    locator = _locator_from(value, where)
    if not isinstance(value, dict):
        return FieldSpec(locator)

    unknown = [
        k for k in value
        if k not in FIELD_OPTIONS and k != "locator" and k not in STRATEGY_ALIASES
    ]
    if unknown:
        raise InvalidPageDescriptorError(
            f"{where}: unknown field option(s) {unknown}; expected {list(FIELD_OPTIONS)}"
        )

    for flag in ("cached", "many"):
        if flag in value and not isinstance(value[flag], bool):
            raise InvalidPageDescriptorError(
                f"{where}.{flag} must be true or false, got {value[flag]!r}"
            )
    scope = value.get("scope")
    if scope is not None and not isinstance(scope, str):
        raise InvalidPageDescriptorError(f"{where}.scope must be a field name, got {scope!r}")

    return FieldSpec(
        locator,
        cached=value.get("cached", False),
        scope=scope,
        many=value.get("many", False),
    )


def _verification_from(value: Any, where: str) -> Optional[Verification]:
    if value is None:
        return None
    if not isinstance(value, dict) or len(value) != 1:
        raise InvalidPageDescriptorError(
            f"{where}: 'verify' must be a mapping with exactly one condition"
        )

    (kind, arg), = value.items()
    if kind == "title":
        return TitleEquals(str(arg))
    if kind == "title_contains":
        return TitleContains(str(arg))
    if kind == "url_contains":
        return UrlContains(str(arg))
    if kind == "element":
        return ElementPresent(_locator_from(arg, f"{where}.element"))
    if kind == "property":
        if not isinstance(arg, dict) or not {"name", "value"} <= set(arg):
            raise InvalidPageDescriptorError(
                f"{where}.property needs 'name' and 'value'"
            )
        return DocumentPropertyEquals(str(arg["name"]), str(arg["value"]))
    raise InvalidPageDescriptorError(f"{where}: unknown verify condition '{kind}'")


def descriptor_from_dict(data: Dict[str, Any], name: str = "") -> PageDescriptor:
    """
    Build a PageDescriptor from a parsed YAML mapping.

    Args:
        data: Mapping with ``target``, optional ``verify`` and ``fields``
        name: Label for the page (used in logs and errors)

    Raises:
        InvalidPageDescriptorError: On any structural problem
    """
    where = name or "page"
    if not isinstance(data, dict):
        raise InvalidPageDescriptorError(f"{where}: descriptor must be a mapping")
    if "target" not in data:
        raise InvalidPageDescriptorError(f"{where}: missing 'target'")

    fields_data = data.get("fields") or {}
    if not isinstance(fields_data, dict):
        raise InvalidPageDescriptorError(f"{where}: 'fields' must be a mapping")

    return PageDescriptor(
        target=str(data["target"]),
        verification=_verification_from(data.get("verify"), where),
        fields={
            field_name: _field_from(value, f"{where}.{field_name}")
            for field_name, value in fields_data.items()
        },
        name=name,
    )


def load_descriptors(path: Union[str, Path]) -> Dict[str, PageDescriptor]:
    """
    Load every page under the top-level ``pages`` key of a YAML file.

    Returns:
        Page name -> PageDescriptor

    Raises:
        InvalidPageDescriptorError: If the file is missing, is not valid
            YAML, or any page is malformed
    """
    path = Path(path)
    if not path.exists():
        raise InvalidPageDescriptorError(f"Page descriptor file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            document = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise InvalidPageDescriptorError(f"Invalid YAML in {path}: {e}") from e

    pages = document.get("pages") if isinstance(document, dict) else None
    if not isinstance(pages, dict):
        raise InvalidPageDescriptorError(f"{path}: expected a top-level 'pages' mapping")

    descriptors = {
        page_name: descriptor_from_dict(page_data, name=page_name)
        for page_name, page_data in pages.items()
    }
    logger.debug(f"Loaded {len(descriptors)} page descriptor(s) from {path}")
    return descriptors


__all__ = [
    "descriptor_from_dict",
    "load_descriptors",
]
