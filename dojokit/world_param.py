"""Checks on the ``self`` and ``world`` parameters of contract functions."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Sequence

SELF_PARAM_NAME = "self"
WORLD_PARAM_NAME = "world"
WORLD_PARAM_TYPE = "IWorldDispatcher"
WORLD_PARAM_TYPE_SNAPSHOT = "@IWorldDispatcher"


@dataclass(frozen=True)
class Param:
    """A function parameter: its name, modifiers and type, as trimmed text."""

    name: str
    modifiers: str = ""
    param_type: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", self.name.strip())
        object.__setattr__(self, "modifiers", self.modifiers.strip())
        object.__setattr__(self, "param_type", self.param_type.strip())


class WorldParamInjectionKind(enum.Enum):
    """How a function receives the world: not at all, read-only, or mutably."""

    NONE = "none"
    VIEW = "view"
    EXTERNAL = "external"


def is_world_param(param_name: str, param_type: str) -> bool:
    """Tell whether a parameter is the ``world`` dispatcher parameter."""
    return param_name == WORLD_PARAM_NAME and param_type in (
        WORLD_PARAM_TYPE,
        WORLD_PARAM_TYPE_SNAPSHOT,
    )


def check_self_parameter(params: Sequence[Param]) -> bool:
    """Tell whether the first parameter is ``self``."""
    return bool(params) and params[0].name == SELF_PARAM_NAME


def parse_world_injection(
    params: Sequence[Param],
) -> tuple[WorldParamInjectionKind, list[str]]:
    """Derive the world injection kind from a parameter list.

    Returns the kind together with the diagnostics found: the world must be
    the only world parameter, come first, not be mixed with ``self``, and be
    a snapshot unless passed by ``ref``.
    """
    diagnostics: list[str] = []
    has_world_injected = False
    injection_kind = WorldParamInjectionKind.NONE

    for idx, param in enumerate(params):
        if not is_world_param(param.name, param.param_type):
            if param.name == SELF_PARAM_NAME and has_world_injected:
                diagnostics.append("You cannot use `self` and `world` parameters together.")
            continue

        if has_world_injected:
            diagnostics.append("Only one world parameter is allowed")
            continue
        has_world_injected = True

        if idx != 0:
            diagnostics.append("World parameter must be the first parameter.")
            continue

        if "ref" in param.modifiers:
            injection_kind = WorldParamInjectionKind.EXTERNAL
        else:
            injection_kind = WorldParamInjectionKind.VIEW
            if param.param_type == WORLD_PARAM_TYPE:
                diagnostics.append("World parameter must be a snapshot if `ref` is not used.")

    return injection_kind, diagnostics