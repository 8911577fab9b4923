"""HomeCare property maintenance API."""
