"""HTTP plumbing shared by every bounded context: envelope, errors and auth."""
