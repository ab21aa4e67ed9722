"""Entry point for `python -m pagedata` and the `pagedata` console script.

gevent must patch the stdlib before typer, click or requests get imported,
so this module patches first and only then loads the CLI.
"""

from gevent import monkey

monkey.patch_all()

from pagedata.cli import main  # noqa: E402

if __name__ == "__main__":
    main()
