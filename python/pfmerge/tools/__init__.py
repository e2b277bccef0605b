"""Command-line front-ends: ``merge`` (fold partial renders) and ``rmse`` (score against a reference)."""
