"""Exceptions raised by easycert operations."""


class EasyCertError(Exception):
    """Base class for easycert errors."""


class UsageError(EasyCertError):
    """Invalid invocation, e.g. a required name is missing."""


class OpenSSLNotFoundError(EasyCertError):
    """The openssl executable is not on PATH."""


class OpenSSLError(EasyCertError):
    """An openssl command exited with a non-zero status.

    Attributes:
        argv: Command line that was run
        returncode: Exit status of the process
        stderr: Captured standard error (stripped)
    """

    def __init__(self, argv: list[str], returncode: int, stderr: str = "") -> None:
        self.argv = argv
        self.returncode = returncode
        self.stderr = stderr.strip()
        command = argv[1] if len(argv) > 1 else argv[0]
        message = f"openssl {command} failed with exit status {returncode}"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)
