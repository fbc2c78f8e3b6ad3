"""Workers package: bulk import orchestration."""
