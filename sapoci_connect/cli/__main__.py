"""Allow ``python -m sapoci_connect.cli``."""

from sapoci_connect.cli.main import cli


cli()
