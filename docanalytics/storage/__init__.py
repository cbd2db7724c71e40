from .blob import BlobStorage, LocalBlobStorage, S3BlobStorage, attachment_disposition, make_storage


__all__ = ["BlobStorage", "LocalBlobStorage", "S3BlobStorage", "attachment_disposition", "make_storage"]
