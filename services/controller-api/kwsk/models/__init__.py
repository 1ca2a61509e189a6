"""Entity models for the KWSK Controller API.

Actions have no table of their own: they live on the compute platform as
Configuration annotations and are rebuilt into these models on every read.
"""

from __future__ import annotations

from kwsk.models.action import Action, ActionExec
from kwsk.models.activation import Activation, ActivationResponse

__all__ = [
    'Action',
    'ActionExec',
    'Activation',
    'ActivationResponse',
]
