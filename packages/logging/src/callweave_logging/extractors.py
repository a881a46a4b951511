"""Parameter and result extraction for log messages.

Extractors turn call arguments and results into short ``key=value`` texts.
An extractor may return a mapping (merged key by key), ``None`` (nothing
logged) or any other value (logged under the extractor's output name).
A failing extractor is logged and skipped; it never fails the call.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from callweave_core import MethodDescriptor

logger = logging.getLogger("callweave.logging")


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True)
class ParameterExtractor:
    """Extracts log data from one named parameter."""

    name: str
    extract: Callable[[Any], Any] = _identity
    output_name: str | None = None
    method_name: str | None = None

    def applies_to(self, method: MethodDescriptor, parameter_name: str) -> bool:
        if self.method_name is not None and self.method_name != method.name:
            return False
        return parameter_name == self.name


@dataclass(frozen=True)
class ResultExtractor:
    """Extracts log data from a call result (or a sequence element)."""

    extract: Callable[[Any], Any] = _identity
    output_name: str | None = None
    method_name: str | None = None

    def applies_to(self, method: MethodDescriptor) -> bool:
        return self.method_name is None or self.method_name == method.name


class MethodCache:
    """Memo keyed on descriptor identity.

    Descriptors of different contracts compare equal when name and parameter
    types match, even though their parameter names may differ.
    """

    def __init__(self) -> None:
        self._entries: dict[int, tuple[MethodDescriptor, Any]] = {}

    def get(self, method: MethodDescriptor, create: Callable[[], Any]) -> Any:
        entry = self._entries.get(id(method))
        if entry is None or entry[0] is not method:
            entry = self._entries[id(method)] = (method, create())
        return entry[1]


def render_pairs(pairs: Mapping[str, Any]) -> str | None:
    """``{"id": 7, "name": "x"}`` -> ``"id=7, name='x'"``; empty -> ``None``."""
    if not pairs:
        return None
    return ", ".join(f"{key}={value!r}" for key, value in pairs.items())


def _collect(
    into: dict[str, Any],
    extract: Callable[[Any], Any],
    value: Any,
    output_name: str,
) -> None:
    try:
        data = extract(value)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Log extractor for %s failed: %s", output_name, exc, exc_info=exc)
        return
    if data is None:
        return
    if isinstance(data, Mapping):
        into.update({str(key): item for key, item in data.items()})
    else:
        into[output_name] = data


def parameters_getter(
    method: MethodDescriptor, extractors: Iterable[ParameterExtractor]
) -> Callable[[tuple[Any, ...]], str | None]:
    """Build the argument renderer of *method* from the matching extractors."""
    names = list(method.signature.parameters) if method.signature is not None else []
    selected = [
        (index, extractor)
        for index, name in enumerate(names)
        for extractor in extractors
        if extractor.applies_to(method, name)
    ]
    if not selected:
        return lambda _args: None

    def get(args: tuple[Any, ...]) -> str | None:
        if len(args) != len(names):
            return None
        pairs: dict[str, Any] = {}
        for index, extractor in selected:
            output_name = extractor.output_name or extractor.name
            _collect(pairs, extractor.extract, args[index], output_name)
        return render_pairs(pairs)

    return get


def result_getter(
    method: MethodDescriptor, extractors: Iterable[ResultExtractor]
) -> Callable[[Any], str | None]:
    """Build the result renderer of *method* from the matching extractors."""
    selected = [extractor for extractor in extractors if extractor.applies_to(method)]
    if not selected:
        return lambda _result: None

    def get(result: Any) -> str | None:
        pairs: dict[str, Any] = {}
        for extractor in selected:
            _collect(pairs, extractor.extract, result, extractor.output_name or "result")
        return render_pairs(pairs)

    return get
