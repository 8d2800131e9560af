# Sidebarctl Output Module
# Rich console output

from sidebarctl.output.console import Console, create_console

__all__ = [
    "Console",
    "create_console",
]
