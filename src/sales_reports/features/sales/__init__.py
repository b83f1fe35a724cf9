"""Sales records: the stores they are read from and their validated shape."""
