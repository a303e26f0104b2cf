"""Domain models for the chat service layer."""

from .context import *  # noqa: F401, F403
from .events import *  # noqa: F401, F403
