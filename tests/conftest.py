import os

# Keep telelog off the console so CLI output stays parseable.
os.environ.setdefault("CODEX_TALON_DISABLE_CONSOLE", "1")
