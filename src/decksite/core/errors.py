from __future__ import annotations


class DecksiteError(RuntimeError):
    pass


class ConfigError(DecksiteError):
    def __init__(self, path: object, problems: list[str]) -> None:
        self.path = path
        self.problems = problems
        detail = "; ".join(problems[:5])
        if len(problems) > 5:
            detail += f" ... ({len(problems)} errors)"
        super().__init__(f"invalid build config {path}: {detail}")


class RendererLaunchError(DecksiteError):
    pass


class RenderStageError(DecksiteError):
    """Renderer exited non-zero for one conversion stage."""

    def __init__(self, stage: str, returncode: int) -> None:
        self.stage = stage
        self.returncode = returncode
        super().__init__(f"render stage '{stage}' failed with exit code {returncode}")


class BrowserNotFoundError(DecksiteError):
    pass
