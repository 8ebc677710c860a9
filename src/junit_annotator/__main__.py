"""Allow running junit_annotator as a module: python -m junit_annotator."""

from junit_annotator.cli import main

if __name__ == "__main__":
    main()
