"""
Player command definitions.

Commands abstract raw input into the four grid moves the
crawler understands. The input layer maps keys/buttons to
commands; game logic only ever sees Commands.

Usage:
    outcome = controller.handle(Command.STEP_FORWARD)
"""

from enum import Enum, auto


class Command(Enum):
    """The four discrete player commands."""

    STEP_FORWARD = auto()
    STEP_BACKWARD = auto()
    ROTATE_LEFT = auto()
    ROTATE_RIGHT = auto()

    @property
    def is_rotation(self) -> bool:
        """True for the two turning commands."""
        return self in (Command.ROTATE_LEFT, Command.ROTATE_RIGHT)
