"""EntryFunctionPayload, TransactionOutcome - write path models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EntryFunctionPayload(BaseModel):
    """Entry-function request body handed to the wallet for signing."""

    model_config = ConfigDict(frozen=True)

    type: str = "entry_function_payload"
    function: str
    type_arguments: list[str] = Field(default_factory=list)
    arguments: list[Any] = Field(default_factory=list)

    @property
    def function_name(self) -> str:
        return self.function.rsplit("::", 1)[-1]

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()


class TransactionOutcome(BaseModel):
    """Finalized transaction as reported by the node."""

    hash: str
    success: bool
    vm_status: str = ""
    version: int | None = None
    function: str | None = None
