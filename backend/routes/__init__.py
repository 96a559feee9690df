"""HTTP routes for the UX audit backend."""
