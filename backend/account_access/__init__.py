"""Account profile access engine."""
