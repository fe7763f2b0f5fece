"""
Name: Request Context (ContextVars)

Responsibilities:
  - Store request-scoped data (request_id, method, path)
  - Carry the authenticated identity for log correlation
  - Provide async-safe context without parameter passing

Collaborators:
  - middleware.py: Sets context at request start
  - guards.py: Sets identity_id/identity_role after authentication
  - logger.py: Reads context for log enrichment

Constraints:
  - Only primitive types (str) for safety
  - Default empty string (never None) for JSON serialization
"""

from contextvars import ContextVar

# R: Request identifier (UUID) - set by middleware
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# R: HTTP method - set by middleware
http_method_var: ContextVar[str] = ContextVar("http_method", default="")

# R: Request path - set by middleware
http_path_var: ContextVar[str] = ContextVar("http_path", default="")

# R: Authenticated identity - set by guards
identity_id_var: ContextVar[str] = ContextVar("identity_id", default="")
identity_role_var: ContextVar[str] = ContextVar("identity_role", default="")


def get_context_dict() -> dict:
    """
    R: Get current context as dict for log enrichment.

    Returns:
        Dict with non-empty context values only
    """
    ctx = {}

    if val := request_id_var.get():
        ctx["request_id"] = val
    if val := http_method_var.get():
        ctx["method"] = val
    if val := http_path_var.get():
        ctx["path"] = val
    if val := identity_id_var.get():
        ctx["identity_id"] = val
    if val := identity_role_var.get():
        ctx["identity_role"] = val

    return ctx


def bind_identity(identity_id: str, role: str) -> None:
    """R: Attach the authenticated identity to the current context."""
    identity_id_var.set(identity_id)
    identity_role_var.set(role)


def clear_context() -> None:
    """R: Reset all context vars (called at request end)."""
    request_id_var.set("")
    http_method_var.set("")
    http_path_var.set("")
    identity_id_var.set("")
    identity_role_var.set("")
