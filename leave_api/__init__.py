"""College leave management API."""
