"""Entry point: python -m oas_scaffold -f <spec file>

Scaffolds api-spec/<version>/ and runs the npm generators.
"""

from __future__ import annotations

from .cli import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
