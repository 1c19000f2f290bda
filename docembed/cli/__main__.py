"""Allow ``python -m docembed.cli`` execution."""

from docembed.cli.embed import main

main()
