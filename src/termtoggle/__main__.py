"""Module entrypoint for `python -m termtoggle`."""

try:
    from .cli import run
except ImportError:
    # Executed as a plain script (runpy.run_path) rather than as a package module.
    from termtoggle.cli import run


if __name__ == "__main__":
    raise SystemExit(run())
