"""Entry point for workflow operations."""

from __future__ import annotations

from .request import Core
from .workflow_runs import WorkflowRuns


class Workflows:
    """Groups the workflow resources."""

    def __init__(self, core: Core) -> None:
        self.runs = WorkflowRuns(core)