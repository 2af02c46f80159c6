"""Allow ``python -m aro_deploy`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m aro_deploy`` behaves identically to the ``aro-deploy``
console script.
"""

from __future__ import annotations

from aro_deploy.cli.app import cli

if __name__ == "__main__":
    cli()
