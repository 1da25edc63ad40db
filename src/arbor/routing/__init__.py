"""Routing — the route tree, the Route record, and the Mux it builds into."""
