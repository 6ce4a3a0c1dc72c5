"""Allow running webvideo as a module: python -m webvideo."""

from webvideo.cli import main

if __name__ == "__main__":
    main()
