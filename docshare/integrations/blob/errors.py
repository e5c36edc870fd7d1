class BlobStoreError(Exception):
    """The blob store rejected or failed a request."""


class BlobNotFoundError(BlobStoreError):
    """No object is stored under the requested key."""

    def __init__(self, key: str):
        super().__init__(f"Blob not found: {key}")
        self.key = key
