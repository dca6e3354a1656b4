"""Convert Facebook Instant Articles into AMP HTML documents."""
