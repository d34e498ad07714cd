"""Plan handling for libvirt machine types that libvirt expands on definition.

Libvirt rewrites short machine type aliases such as ``q35`` into fully
versioned names such as ``pc-q35-10.1``. Treating that expansion as a change
would make every plan show a spurious difference, so the planned value is
replaced with the stored one when the latter is an expansion of the former.
"""

from __future__ import annotations

from typing import Optional

DESCRIPTION = "Handles libvirt's machine type expansion (e.g., q35 -> pc-q35-10.1)"
MARKDOWN_DESCRIPTION = "Handles libvirt's machine type expansion (e.g., `q35` -> `pc-q35-10.1`)"


def is_expanded_machine_type(plan: str, state: str) -> bool:
    """Return True if ``state`` looks like libvirt's expansion of ``plan``."""
    if plan in state:
        return True
    if plan == "q35":
        return state.startswith("pc-q35-")
    if plan == "pc":
        return state.startswith("pc-i440fx-") or state.startswith("pc-")
    return False


def modify_machine_type_plan(plan: Optional[str], state: Optional[str]) -> Optional[str]:
    """Return the machine type value that should go into the plan.

    ``None`` stands for a null (or not yet known) value. When there is no
    stored state, or no planned value, the plan is returned unchanged. When
    the stored value is an expansion of the planned one, the stored value is
    kept so that no update is triggered.
    """
    if state is None or plan is None:
        return plan
    if plan == state:
        return plan
    if is_expanded_machine_type(plan, state):
        return state
    return plan