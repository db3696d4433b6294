from abc import ABCMeta, abstractmethod

import os


class AbstractRegisteringType(ABCMeta):
    """Register all subclass with `name` but without abstract methods."""

    def __init__(cls, name, bases, attributes):
        super().__init__(name, bases, attributes)

        if not hasattr(cls, 'members'):
            cls.members = {}

        if hasattr(cls, 'name') and not cls.__abstractmethods__:
            cls.members[cls.name] = cls


def abstract_property(method):
    return property(abstractmethod(method))


def available_cores():
    return len(os.sched_getaffinity(0))


def preview(items, limit=5):
    """Short, deterministic listing of items for error messages."""
    items = sorted(items, key=str)
    shown = ', '.join(str(item) for item in items[:limit])
    if len(items) > limit:
        shown += f', ... ({len(items) - limit} more)'
    return shown
