"""Contracts: method descriptors and return-shape classification."""

from __future__ import annotations

from callweave_core.contracts.descriptor import (
    ContractDescriptor,
    MethodDescriptor,
    ReturnShape,
    classify,
    describe_contract,
    describe_method,
    shape_of_annotation,
)

__all__ = [
    "ContractDescriptor",
    "MethodDescriptor",
    "ReturnShape",
    "classify",
    "describe_contract",
    "describe_method",
    "shape_of_annotation",
]
