"""Property Showcase: real-estate catalog and admin API."""
