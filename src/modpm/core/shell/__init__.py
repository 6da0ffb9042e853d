from modpm.core.shell.abc import CommandResult, Shell
from modpm.core.shell.real import RealShell

__all__ = ["CommandResult", "RealShell", "Shell"]
