"""
Entry point for running lucid as a Python module: `python -m lucid`

The console script declared in pyproject.toml calls `lucid.main:main` directly;
both paths end in the same `main()`.
"""

from .main import main

if __name__ == "__main__":
    main()
