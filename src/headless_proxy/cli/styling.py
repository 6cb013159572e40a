"""Terminal styling for CLI output.

Every command prints through these helpers so the output reads the same:
- Cyan bold for section headers and labels
- Green with a checkmark for registered members and saved changes
- Red with a cross for failed rows and server errors
- Yellow for warnings that do not stop the command
- Dim for empty results and placeholders

Colors are dropped automatically when output is not a terminal.
"""

from __future__ import annotations

__all__ = [
    "style_dim",
    "style_error",
    "style_header",
    "style_label",
    "style_success",
    "style_warning",
]

import click


def style_header(title: str) -> str:
    """Style a section header with dashes.

    Example:
        >>> click.echo(style_header("Import Results"))
        --- Import Results ---
    """
    return click.style(f"--- {title} ---", fg="cyan", bold=True)


def style_label(label: str) -> str:
    """Style a label; the colon is added here.

    Example:
        >>> click.echo(style_label("Importing") + " 3 email(s) into site-a")
        Importing: 3 email(s) into site-a
    """
    return click.style(f"{label}:", fg="cyan", bold=True)


def style_success(message: str) -> str:
    """Green line with a checkmark, e.g. "✓ a@example.com: Member registered instantly."."""
    return click.style(f"✓ {message}", fg="green")


def style_error(message: str) -> str:
    """Style an error line with a cross mark.

    Args:
        message: Text without the cross.

    Example:
        >>> click.echo(style_error("b@example.com: Network error connecting to local server."), err=True)
        ✗ b@example.com: Network error connecting to local server.
    """
    return click.style(f"✗ {message}", fg="red")


def style_warning(message: str) -> str:
    """Yellow text, no prefix, e.g. "Project list already exists: ..."."""
    return click.style(message, fg="yellow")


def style_dim(message: str) -> str:
    """Muted text for empty results and placeholders, e.g. "No projects configured."."""
    return click.style(message, dim=True)
