"""Hook adaptation — turns every supported hook overload into one canonical form.

Hook setters accept a zero-argument form, a call-context form and (for
stateful policies) state-first forms.  They are told apart by positional
arity once, at configuration time; the stored closure always has the
canonical signature of its slot:

* gate / before: ``(target, method, args)``
* after / error / next: ``(state, target, method, args, value)``
* complete: ``(state, target, method, args)``

Callables taking ``*args`` (mocks, wrappers) are given the canonical form;
callables whose signature cannot be read (some C builtins) are rejected.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..primitives.exceptions import InterceptionConfigurationError
from ..utils import VARIADIC_ARITY, positional_arity

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    Adapter = Callable[[Callable[..., Any]], Callable[..., Any]]


def _identity(hook: Callable[..., Any]) -> Callable[..., Any]:
    return hook


GATE_SHAPES: Mapping[int, Adapter] = {
    0: lambda f: lambda _t, _m, _a: f(),
    3: _identity,
}

BEFORE_SHAPES: Mapping[int, Adapter] = GATE_SHAPES

STATEFUL_VALUE_SHAPES: Mapping[int, Adapter] = {
    1: lambda f: lambda s, _t, _m, _a, _v: f(s),
    2: lambda f: lambda s, _t, _m, _a, v: f(s, v),
    5: _identity,
}

VALUE_SHAPES: Mapping[int, Adapter] = {
    0: lambda f: lambda _s, _t, _m, _a, _v: f(),
    1: lambda f: lambda _s, _t, _m, _a, v: f(v),
    4: lambda f: lambda _s, t, m, a, v: f(t, m, a, v),
}

STATEFUL_COMPLETE_SHAPES: Mapping[int, Adapter] = {
    1: lambda f: lambda s, _t, _m, _a: f(s),
    4: _identity,
}

COMPLETE_SHAPES: Mapping[int, Adapter] = {
    0: lambda f: lambda _s, _t, _m, _a: f(),
    3: lambda f: lambda _s, t, m, a: f(t, m, a),
}


def adapt(
    hook: Callable[..., Any] | None,
    slot: str,
    shapes: Mapping[int, Adapter],
) -> Callable[..., Any]:
    """Return *hook* converted to the canonical signature of *slot*."""
    if hook is None:
        raise InterceptionConfigurationError(f"The {slot} hook must not be None")
    if not callable(hook):
        raise InterceptionConfigurationError(
            f"The {slot} hook must be callable, got {type(hook).__name__}"
        )

    arity = positional_arity(hook)
    if arity == -1:
        raise InterceptionConfigurationError(
            f"The signature of the {slot} hook {hook!r} cannot be read; "
            "wrap it in a function or lambda"
        )
    if arity == VARIADIC_ARITY:
        arity = max(shapes)

    adapter = shapes.get(arity)
    if adapter is None:
        accepted = ", ".join(str(n) for n in sorted(shapes))
        raise InterceptionConfigurationError(
            f"The {slot} hook must take {accepted} positional arguments, "
            f"{hook!r} takes {arity}"
        )
    return adapter(hook)
