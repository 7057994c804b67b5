"""HTTP preview service for usefulreadme."""
