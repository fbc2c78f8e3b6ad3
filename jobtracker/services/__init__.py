"""Services package: CSV handling, job lifecycle and customer directory."""
