"""ECR image references and tag lookups."""
