"""
Logging utilities for the MPI cluster controller.

Log records go to stderr through the standard logging module. Short colored
status lines for the user go to stdout through a rich console.
"""

import functools
import logging
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False, soft_wrap=True)


def setup_logging(log_level: str = "WARNING", log_file: str | None = None) -> None:
    """Set up logging configuration."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )
    logging.getLogger("paramiko").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)


def status(message: str) -> None:
    console.print(f"[blue]{escape(message)}[/blue]")


def success(message: str) -> None:
    console.print(f"[green]{escape(message)}[/green]")


def warning(message: str) -> None:
    console.print(f"[yellow]{escape(message)}[/yellow]")


def failure(message: str) -> None:
    console.print(f"[red]{escape(message)}[/red]")


F = TypeVar("F", bound=Callable[..., Any])


def log_function_call(func: F) -> F:
    """Decorator to log function calls."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = get_logger(func.__module__)
        logger.debug(f"Calling {func.__name__} with args={args}, kwargs={kwargs}")
        try:
            result = func(*args, **kwargs)
            logger.debug(f"{func.__name__} completed successfully")
            return result
        except Exception as e:
            logger.debug(f"{func.__name__} failed with error: {e}")
            raise

    return cast(F, wrapper)


def log_execution_time(func: F) -> F:
    """Decorator to log function execution time."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = get_logger(func.__module__)
        start_time = time.time()
        try:
            result = func(*args, **kwargs)
            execution_time = time.time() - start_time
            logger.info(f"{func.__name__} executed in {execution_time:.2f} seconds")
            return result
        except Exception as e:
            execution_time = time.time() - start_time
            logger.error(
                f"{func.__name__} failed after {execution_time:.2f} seconds with error: {e}"
            )
            raise

    return cast(F, wrapper)
