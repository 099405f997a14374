"""Read-only HTML reports over the Client, Product and Orders tables."""
