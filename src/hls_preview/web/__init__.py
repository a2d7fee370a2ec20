"""HTTP intake for preview jobs."""
