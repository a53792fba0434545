from __future__ import annotations


class DeployError(RuntimeError):
    """Fatal deployment failure; the run stops and exits non-zero."""


class CommandError(DeployError):
    def __init__(self, argv: list[str], returncode: int, stderr: str) -> None:
        self.argv = argv
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Command failed ({returncode}): {' '.join(argv)}\n{stderr}".rstrip())
