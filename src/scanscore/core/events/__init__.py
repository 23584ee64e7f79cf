"""Application lifecycle events."""

from scanscore.core.events.lifespan import lifespan


__all__ = ["lifespan"]
