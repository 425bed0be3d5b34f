"""City weather lookup with per-day time sliders."""
