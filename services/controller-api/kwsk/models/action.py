"""Action model for OpenWhisk serverless functions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ActionExec:
    """Executable part of an action: runtime kind, source and image."""

    kind: str = ''
    code: str = ''
    image: str = ''

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> Optional[ActionExec]:
        if data is None:
            return None
        return cls(
            kind=data.get('kind') or '',
            code=data.get('code') or '',
            image=data.get('image') or '',
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            'kind': self.kind,
            'code': self.code,
            'image': self.image,
        }


@dataclass
class Action:
    """
    An invocable unit exposed by the API.

    The platform resource name is derived from ``name`` alone, so two
    actions whose names normalize to the same string in one namespace
    are the same action.
    """

    name: str
    namespace: str = ''
    version: str = ''
    exec: Optional[ActionExec] = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            'name': self.name,
            'namespace': self.namespace,
            'version': self.version,
        }
        if self.exec is not None:
            result['exec'] = self.exec.to_dict()
        return result
