"""Allow running parbuild as `python -m parbuild`."""

from parbuild.cli import run

run()
