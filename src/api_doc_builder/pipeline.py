"""Render pipeline — runs every handler over the finished tree.

Handlers are independent: each one renders its files in memory, then the
files are written under the output directory. A handler that fails has its
partially written files removed and is reported, while the remaining
handlers still run. The pipeline only fails when every handler failed.
"""

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from pydantic import BaseModel

from api_doc_builder.errors import ArtifactWriteFailed, DocBuilderError, PipelineError
from api_doc_builder.handler.base import RenderEnvironment, TreeHandler
from api_doc_builder.schema.tree import Tree

logger = logging.getLogger(__name__)


class HandlerReport(BaseModel):
    """Outcome of one handler: the files it wrote, or why it failed."""

    handler: str
    artifacts: list[Path] = []
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PipelineReport(BaseModel):
    reports: list[HandlerReport] = []

    @property
    def written(self) -> list[Path]:
        return [path for report in self.reports for path in report.artifacts]

    @property
    def failed(self) -> list[HandlerReport]:
        return [report for report in self.reports if not report.ok]

    @property
    def ok(self) -> bool:
        return not self.failed


def write_artifact(path: Path, content: str) -> None:
    """Write one output file, creating parent directories as needed."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise ArtifactWriteFailed(path, e.strerror or str(e)) from e


def run_handler(handler: TreeHandler, tree: Tree, env: RenderEnvironment) -> HandlerReport:
    """Render and write one handler's files; any failure is recorded on the report."""
    report = HandlerReport(handler=handler.name)
    try:
        files = handler.handle(tree, env)
        for file_name, content in files.items():
            path = env.out / file_name
            if not path.resolve().is_relative_to(env.out.resolve()):
                raise ArtifactWriteFailed(path, "outside the output directory")
            write_artifact(path, content)
            report.artifacts.append(path)
    except Exception as e:
        if isinstance(e, DocBuilderError):
            logger.error("Handler %s failed: %s", handler.name, e)
        else:
            logger.exception("Handler %s crashed", handler.name)
        _discard(report.artifacts)
        report.artifacts = []
        report.error = str(e)
        return report

    logger.info("Handler %s wrote %d files to %s", handler.name, len(report.artifacts), env.out)
    return report


def _discard(paths: list[Path]) -> None:
    for path in paths:
        try:
            path.unlink()
        except OSError:
            logger.warning("Could not remove partial output %s", path)


def render(
    tree: Tree,
    handlers: Sequence[TreeHandler],
    env: RenderEnvironment,
    *,
    parallel: bool = False,
) -> PipelineReport:
    """Run ``handlers`` over ``tree`` and write their files under ``env.out``.

    With ``parallel`` each handler gets its own worker thread; reports are
    still returned in handler order.

    Raises:
        PipelineError: every handler failed.
    """
    if parallel and len(handlers) > 1:
        with ThreadPoolExecutor(max_workers=len(handlers)) as pool:
            reports = list(pool.map(lambda h: run_handler(h, tree, env), handlers))
    else:
        reports = [run_handler(handler, tree, env) for handler in handlers]

    result = PipelineReport(reports=reports)
    if reports and not any(report.ok for report in reports):
        raise PipelineError(reports)
    return result
