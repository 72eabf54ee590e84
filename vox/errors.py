"""Error taxonomy shared by the capture and transcription pipeline."""

from typing import List


class VoxError(Exception):
    """Base class for every error the pipeline reports to the CLI."""

    kind = "error"
    exit_code = 1


class LocalIOError(VoxError):
    """Temp file, duration probe, trim or other local I/O failure."""

    kind = "local_io"


class MissingDependencyError(VoxError):
    """A required external program is not on the PATH."""

    kind = "missing_dependency"

    def __init__(self, summary: str, install_hints: List[str]):
        self.summary = summary
        self.install_hints = install_hints
        lines = [summary, "", "Install with:"]
        lines.extend(f"  {hint}" for hint in install_hints)
        super().__init__("\n".join(lines))


class MissingCredentialError(VoxError):
    """The transcription API key is not configured."""

    kind = "missing_credential"
    exit_code = 3

    def __init__(self, env_var: str = "OPENAI_API_KEY"):
        self.env_var = env_var
        super().__init__(
            f"{env_var} environment variable not set\n\n"
            f"Set it with:\n  export {env_var}=your-key"
        )


class RemoteAPIError(VoxError):
    """The remote transcription call failed (rate limit, timeout, server error)."""

    kind = "remote_api"
    exit_code = 2


class UserCancelledError(VoxError):
    """The operator aborted the session."""

    kind = "user_cancelled"
    exit_code = 130

    def __init__(self, message: str = "cancelled by user"):
        super().__init__(message)
