"""
Event system for the casinojack engine.

This package provides the emitter the engine publishes its state changes on.
"""

from casinojack.events.emitter import EventEmitter, EventPriority, EngineEventType

__all__ = ["EventEmitter", "EventPriority", "EngineEventType"]
