from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict

from .contract import InferenceCall


class InferenceRequest(BaseModel):
    model_config = ConfigDict(strict=True)

    in1: List[str]
    in2: List[str]
    in3: str

    def to_call(self) -> InferenceCall:
        return InferenceCall(in1=list(self.in1), in2=list(self.in2), in3=self.in3)


class HelloResponse(BaseModel):
    message: str


class ResponseEnvelope(BaseModel):
    message: str
    data: Any | None = None
    error: str | None = None
