"""Report pipeline services: normalization, formula rendering, sheet builders, orchestration."""
