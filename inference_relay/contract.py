"""The on-chain inference contract the relay calls."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List

from .sui_client import MoveCallRequest, TransactionBlockOptions

PACKAGE_OBJECT_ID = "0x1a17fdd92c9d989f5200900302df4901d66fd04062a34eccbb83f085230838d7"
MODULE = "Inference"
FUNCTION = "run"
GAS_OBJECT = "0xfa6e9bf9f256f322330c56b8ad2b128c051f95d21e78482a64e8fd72eeea6bc2"
GAS_BUDGET = "2000000000"

EXECUTION_OPTIONS = TransactionBlockOptions(
    show_input=True,
    show_raw_input=True,
    show_effects=True,
)


@dataclass(frozen=True)
class InferenceCall:
    """Arguments of ``Inference::run``: two string vectors and a scalar string."""

    in1: List[str] = field(default_factory=list)
    in2: List[str] = field(default_factory=list)
    in3: str = ""

    def arguments(self) -> List[Any]:
        return [list(self.in1), list(self.in2), self.in3]


def build_move_call(signer_address: str, call: InferenceCall) -> MoveCallRequest:
    """Address *call* to the fixed package, module, function and gas object."""

    return MoveCallRequest(
        signer=signer_address,
        package_object_id=PACKAGE_OBJECT_ID,
        module=MODULE,
        function=FUNCTION,
        type_arguments=[],
        arguments=call.arguments(),
        gas=GAS_OBJECT,
        gas_budget=GAS_BUDGET,
    )


__all__ = [
    "EXECUTION_OPTIONS",
    "FUNCTION",
    "GAS_BUDGET",
    "GAS_OBJECT",
    "InferenceCall",
    "MODULE",
    "PACKAGE_OBJECT_ID",
    "build_move_call",
]
