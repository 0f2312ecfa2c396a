"""S3 reconciliation steps and the orchestrating reconciler."""
