"""
S3 storage backends, static assets and uploaded tournament banners kept under separate prefixes
"""
from storages.backends.s3boto3 import S3Boto3Storage


class StaticStorage(S3Boto3Storage):
    """Collected static files"""

    location = "static"
    default_acl = "public-read"
    file_overwrite = True


class MediaStorage(S3Boto3Storage):
    """Organizer uploads (banners, share covers)"""

    location = "media"
    default_acl = "public-read"
    file_overwrite = False
