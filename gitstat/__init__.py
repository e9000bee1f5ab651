"""Daily change activity for a git repository over a date range."""
