"""CLI command implementations; each module exposes run(args) -> int."""
