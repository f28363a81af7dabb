"""Install and uninstall commands.

install copies the target artifact and exported headers from the dist tree
to the install prefix; uninstall removes exactly those files. Every file is
handled independently: a failure is reported as [FAILED] and the remaining
files are still processed.
"""

from typing import Sequence

from parbuild import output
from parbuild.config import BuildConfiguration
from parbuild.fileops import copy_file, remove_file
from parbuild.paths import header_dist_path, header_install_path, install_target_path, target_path


class InstallCommand:
    """Copy the dist tree to the install prefix."""

    name = "install"
    description = "Copy a dist tree to a specified directory."

    def run(self, args: Sequence[str], sources: Sequence[str], config: BuildConfiguration) -> int:
        output.log_banner("INSTALL", major=True)

        source = target_path(config)
        destination = install_target_path(config)
        output.log_status(f"Copy {source} -> {destination}...", copy_file(source, destination))

        headers = config.header_files
        for index, header in enumerate(headers, start=1):
            source = header_dist_path(header, config)
            destination = header_install_path(header, config)
            output.log_status(f"Copy {source} -> {destination} ({index}/{len(headers)})...", copy_file(source, destination))

        output.log_info("Installation complete.")
        return 0


class UninstallCommand:
    """Remove every file placed by install."""

    name = "uninstall"
    description = "Remove all installed files."

    def run(self, args: Sequence[str], sources: Sequence[str], config: BuildConfiguration) -> int:
        output.log_banner("UNINSTALL", major=True)

        target = install_target_path(config)
        output.log_status(f"Remove {target}...", remove_file(target))

        headers = config.header_files
        for index, header in enumerate(headers, start=1):
            path = header_install_path(header, config)
            output.log_status(f"Remove {path} ({index}/{len(headers)})...", remove_file(path))

        output.log_info("Uninstalled.")
        return 0
