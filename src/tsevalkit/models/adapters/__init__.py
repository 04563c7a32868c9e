"""Family adapters for tsevalkit.

One module per model family; see ``tsevalkit.models.registry.FAMILY_ADAPTERS``.
"""

from __future__ import annotations

__all__ = []
