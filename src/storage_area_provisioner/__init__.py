"""Storage Area Provisioner: S3-backed storage areas for data product components."""

__version__ = "0.1.0"
