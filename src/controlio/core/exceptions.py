"""Exception hierarchy for control-io."""

from __future__ import annotations


class ControlIoError(Exception):
    """Base class for control-io errors."""


class FatalControlError(ControlIoError):
    """An inconsistency the process must not keep running with.

    The event bus stops its consumer when a handler raises one of these,
    which in turn ends :meth:`ControlPanel.run`.
    """


class UnresolvedTargetError(FatalControlError):
    """A recognised command could not be mapped to a hardware output."""

    def __init__(self, command: str) -> None:
        super().__init__(f"No hardware output wired for command '{command}'")
        self.command = command
