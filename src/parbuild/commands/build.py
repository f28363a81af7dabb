"""Build command implementation.

Stages, in order:
    1. COMPILING: create the build tree and compile all sources in parallel
    2. LINKING: link or archive the objects into the target artifact
    3. HEADERS: copy configured headers into dist/include (only if any)
"""

import logging
import time
from typing import Optional, Sequence

from parbuild import output
from parbuild.callbacks import ConsoleCallback, ProgressCallback
from parbuild.compiler import CompilationError
from parbuild.config import BuildConfiguration
from parbuild.fileops import copy_file, setup_tree
from parbuild.linker import link
from parbuild.paths import header_dist_path, header_source_path, object_paths
from parbuild.process import Invoker, run_command
from parbuild.scheduler import JobScheduler, parse_jobs, resolve_jobs

logger = logging.getLogger(__name__)


class BuildCommand:
    """Compile and link the project, then export headers.

    Args:
        invoker: Runs compiler and linker commands
        callback: Progress callback (defaults to console output)
    """

    name = "build"
    description = "Compile and link source files. Add `-j N` or `--jobs N`, where N is a number of threads to utilize."

    def __init__(self, invoker: Invoker = run_command, callback: Optional[ProgressCallback] = None):
        self.invoker = invoker
        self.callback = callback if callback is not None else ConsoleCallback()

    def run(self, args: Sequence[str], sources: Sequence[str], config: BuildConfiguration) -> int:
        """Build the project.

        Returns:
            0 on success, otherwise the exit status of the failing compiler or linker
        """
        start_time = time.time()
        output.log_banner("COMPILING", major=True)
        jobs = resolve_jobs(parse_jobs(args), len(sources))
        output.log_info(f"Using {jobs} jobs")

        if not setup_tree(config):
            output.log_warning(f"Could not create the build tree under {config.build_dir} and {config.dist_dir}")

        objects = object_paths(sources, config)
        scheduler = JobScheduler(config, invoker=self.invoker, callback=self.callback)
        try:
            scheduler.schedule(sources, objects, jobs)
        except CompilationError as e:
            logger.debug(f"Compilation aborted: {e}")
            return e.status

        output.log_banner("LINKING")
        status = link(config, objects, invoker=self.invoker, callback=self.callback)
        if status != 0:
            return status

        self._export_headers(config)

        output.log_info("Compiled successfully.")
        output.log(f"Build time: {time.time() - start_time:.2f}s", verbose_only=True)
        return 0

    def _export_headers(self, config: BuildConfiguration) -> None:
        """Copy configured headers into dist/include. Failures are reported, not fatal."""
        headers = config.header_files
        if not headers:
            return

        output.log_banner("HEADERS")
        for index, header in enumerate(headers, start=1):
            source = header_source_path(header, config)
            destination = header_dist_path(header, config)
            ok = copy_file(source, destination)
            output.log_status(f"Copy {source} -> {destination} ({index}/{len(headers)})...", ok)
