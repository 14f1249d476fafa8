"""manage Codex CLI profiles and apply them to ~/.codex."""
__version__ = "0.1.0"
