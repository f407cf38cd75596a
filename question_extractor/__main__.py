"""
Module entry point for: python -m question_extractor

Allows running the extractor directly as a module:
    python -m question_extractor extract <file> [options]
    python -m question_extractor batch <directory> [options]
    python -m question_extractor serve [options]
"""

from .cli import cli


def main():
    cli()


if __name__ == "__main__":
    main()
