"""Infrastructure layer: configuration, settings, diagnostics collection and reports."""
