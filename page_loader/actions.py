"""
Element actions.

An Action is a small value object describing what to do with a resolved
element. Proxies build them; browsing backends execute them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class ActionKind(str, Enum):
    SEND_KEYS = "send_keys"
    CLICK = "click"
    CLEAR = "clear"
    SUBMIT = "submit"
    READ_TEXT = "read_text"
    GET_ATTRIBUTE = "get_attribute"
    IS_DISPLAYED = "is_displayed"


@dataclass(frozen=True)
class Action:
    """
    A single element interaction.

    Attributes:
        kind: Which interaction to perform
        args: Positional arguments for it (text to type, attribute name)
    """

    kind: ActionKind
    args: Tuple[str, ...] = ()

    def __str__(self) -> str:
        if not self.args:
            return self.kind.value
        return f"{self.kind.value}({', '.join(repr(a) for a in self.args)})"


def send_keys(text: str) -> Action:
    return Action(ActionKind.SEND_KEYS, (text,))


def click() -> Action:
    return Action(ActionKind.CLICK)


def clear() -> Action:
    return Action(ActionKind.CLEAR)


def submit() -> Action:
    return Action(ActionKind.SUBMIT)


def read_text() -> Action:
    return Action(ActionKind.READ_TEXT)


def get_attribute(name: str) -> Action:
    return Action(ActionKind.GET_ATTRIBUTE, (name,))


def is_displayed() -> Action:
    return Action(ActionKind.IS_DISPLAYED)


__all__ = [
    "ActionKind",
    "Action",
    "send_keys",
    "click",
    "clear",
    "submit",
    "read_text",
    "get_attribute",
    "is_displayed",
]
