"""The sandbox instance that capability installers populate.

A Sandbox starts empty; its attribute namespace only ever holds members that
installers attach. Shared behaviour lives in module-level functions instead
of on the class so that nothing but installed members shows up on an
instance.
"""

from __future__ import annotations

from typing import Any


class Sandbox:
    """An object assembled from one or more capabilities.

    Installers attach members with plain attribute assignment::

        def dom(box):
            box.get_element = lambda selector: ...

    Members not attached by any installer are simply absent, so
    ``hasattr(box, "get_element")`` tells whether the ``dom`` capability
    was selected.
    """

    def __repr__(self) -> str:
        return f"<Sandbox members={sorted(vars(self))}>"


def members(box: Sandbox) -> dict[str, Any]:
    """Return a copy of the members attached to ``box``."""
    return dict(vars(box))
