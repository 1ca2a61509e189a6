"""Activation model: the outcome of a single synchronous invocation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ActivationResponse:
    success: bool
    result: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            'success': self.success,
            'result': self.result,
        }


@dataclass
class Activation:
    """
    Ephemeral invocation record.

    Activations are built per call and returned to the caller; they are
    never persisted, and ``logs`` is always empty.
    """

    activation_id: str
    name: str
    namespace: str
    response: ActivationResponse
    logs: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            'activationId': self.activation_id,
            'name': self.name,
            'namespace': self.namespace,
            'response': self.response.to_dict(),
            'logs': list(self.logs),
        }
