"""SABnzbd command-line wrapper: enqueue an NZB by URL via `sabcmd add --nzb`."""

import structlog
from opentelemetry import trace

from app.executor import ProcessExecutionError, ProcessExecutor

logger = structlog.get_logger()
tracer = trace.get_tracer(__name__)


class SabnzbdError(Exception):
    """Raised when sabcmd fails to start, times out, writes to stderr or exits non-zero."""


def build_add_args(download_url: str) -> list[str]:
    """Arguments for `sabcmd add`; the URL stays a single argument, verbatim."""
    return ["add", "--nzb", download_url]


class SabnzbdCli:
    def __init__(
        self,
        executable: str,
        executor: ProcessExecutor,
        fail_on_stderr: bool = True,
    ) -> None:
        self.executable = executable
        self.executor = executor
        self.fail_on_stderr = fail_on_stderr

    def add_nzb(self, download_url: str) -> str:
        """Hand download_url to sabcmd and return its stdout. Raises SabnzbdError."""
        with tracer.start_as_current_span("sabnzbd.add") as span:
            span.set_attribute("download.url", download_url)
            logger.info("sabnzbd.add.start", download_url=download_url)
            try:
                result = self.executor.execute(self.executable, build_add_args(download_url))
            except ProcessExecutionError as e:
                span.record_exception(e)
                logger.error("sabnzbd.add.error", download_url=download_url, error=str(e))
                raise SabnzbdError(str(e)) from e

            span.set_attribute("process.exit_code", result.returncode)
            if result.stderr and self.fail_on_stderr:
                logger.error(
                    "sabnzbd.add.stderr",
                    download_url=download_url,
                    stderr=result.stderr,
                    returncode=result.returncode,
                )
                raise SabnzbdError("sabcmd wrote to stderr")
            if result.returncode != 0:
                logger.error(
                    "sabnzbd.add.nonzero_exit",
                    download_url=download_url,
                    returncode=result.returncode,
                    stderr=result.stderr,
                )
                raise SabnzbdError(f"sabcmd exited with code {result.returncode}")

            logger.info("sabnzbd.add.success", download_url=download_url, stdout=result.stdout)
            return result.stdout
