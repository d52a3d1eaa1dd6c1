# clipfetch/__main__.py
import sys


def cli(argv=None):
    """
    Minimal launcher so you can run:
      - python3 -m clipfetch serve
      - python3 -m clipfetch download URL
    """
    if argv is not None:
        sys.argv = [sys.argv[0]] + list(argv)
    from .cli import app
    return app()

if __name__ == "__main__":
    sys.exit(cli())
