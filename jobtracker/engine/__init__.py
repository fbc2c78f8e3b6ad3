"""Engine package: date normalization, due status, column resolution, row transformation and job list views."""
