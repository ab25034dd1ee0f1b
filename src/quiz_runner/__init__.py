"""Interactive quiz runner for `prompt|answer` question banks."""
