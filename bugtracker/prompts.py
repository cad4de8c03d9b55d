"""
Input Collector

Prompts until a validator accepts the entered line.
"""

import logging
from typing import Callable, Optional, Union

from rich import get_console
from rich.console import Console

from .errors import ValidationError
from .validators import Validator

logger = logging.getLogger(__name__)


def get_valid_input(
    prompt: str,
    validator: Union[Validator, Callable[[str], bool]],
    error_message: Optional[str] = None,
    console: Optional[Console] = None,
    max_attempts: Optional[int] = None,
) -> str:
    """
    Read one line at a time until validator accepts it.

    Args:
        prompt: Text shown before each read
        validator: Validator instance or plain str -> bool predicate
        error_message: Shown after a rejected line (defaults to validator.error_message)
        console: Rich console to read/write through
        max_attempts: Give up after this many rejected lines; None retries forever

    Returns:
        The first accepted line

    Raises:
        ValidationError: max_attempts lines were all rejected
        EOFError: input ended before a valid line was read
    """
    console = console or get_console()
    if error_message is None:
        error_message = getattr(validator, "error_message", "Invalid input.")

    attempts = 0
    while True:
        value = console.input(f"{prompt}: ")
        if validator(value):
            return value

        attempts += 1
        logger.debug(f"Rejected input for {prompt!r} (attempt {attempts})")
        console.print(error_message, markup=False)

        if max_attempts is not None and attempts >= max_attempts:
            raise ValidationError(f"No valid input after {attempts} attempts: {error_message}")
