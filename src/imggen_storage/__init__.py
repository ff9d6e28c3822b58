"""Image Storage Service Package."""

__version__ = "1.0.0"
__description__ = (
    "Image content and metadata storage for ImgGen, using AWS Lambda, S3, and DynamoDB"
)

__all__ = ["handlers", "core"]
