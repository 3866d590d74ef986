"""Run ``python -m autoinst`` as the answer fetch tool."""

from autoinst.cli.main import fetch_main


if __name__ == "__main__":
    fetch_main()
