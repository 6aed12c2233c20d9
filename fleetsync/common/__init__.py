"""Small helpers shared across fleetsync packages."""
