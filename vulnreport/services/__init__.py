"""Report pipeline: classify, map and assemble occurrences; resolve images and list occurrences."""
