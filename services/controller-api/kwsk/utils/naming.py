"""Name rules mapping OpenWhisk identifiers onto platform resource names."""

from __future__ import annotations

# OpenWhisk uses "_" for the authenticated user's default namespace. There is
# no auth layer here, so it maps to a fixed platform namespace.
DEFAULT_NAMESPACE_ALIAS = '_'
DEFAULT_NAMESPACE = 'default'


def normalize_action_name(name: str) -> str:
    """Map an action name to its platform resource name.

    Lower-cases the name and replaces each space with a hyphen. Any other
    character is passed through untouched and left for the platform to
    accept or reject.

    Args:
        name: Action name as supplied by the caller.

    Returns:
        Resource name shared by the action's Configuration and Route.
    """
    return name.lower().replace(' ', '-')


def resolve_namespace(namespace: str, default: str = DEFAULT_NAMESPACE) -> str:
    """Resolve the ``_`` namespace alias.

    Args:
        namespace: Namespace from the request path.
        default: Namespace substituted for the alias.

    Returns:
        Platform namespace name.
    """
    if namespace == DEFAULT_NAMESPACE_ALIAS:
        return default
    return namespace
