"""AWS-facing services of the Storage Area Provisioner."""
