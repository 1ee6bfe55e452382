"""Collision module: Event driver (serial and multiprocess)."""

from nucleon_mc.collision.engine import CollisionEngine, EventResult

__all__ = ["CollisionEngine", "EventResult"]
