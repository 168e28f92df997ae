"""External service integrations."""

from .functions import Functions
