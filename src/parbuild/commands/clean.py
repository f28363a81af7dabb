"""Clean command implementation.

No manifest of build outputs is kept: object paths are recomputed from the
source list, so clean removes what build produced only when it is given the
same sources.
"""

from typing import Sequence

from parbuild import output
from parbuild.config import BuildConfiguration
from parbuild.fileops import remove_file
from parbuild.paths import object_paths, target_path


class CleanCommand:
    """Remove object files and the target artifact."""

    name = "clean"
    description = "Remove all temporary build files and dist tree."

    def run(self, args: Sequence[str], sources: Sequence[str], config: BuildConfiguration) -> int:
        output.log_banner("CLEAN", major=True)

        objects = object_paths(sources, config)
        for index, obj in enumerate(objects, start=1):
            output.log_status(f"Removing {obj} ({index}/{len(objects)})...", remove_file(obj))

        target = target_path(config)
        output.log_status(f"Removing target {target}...", remove_file(target))
        return 0
