import base64
import json

from imggen_storage.handlers.get_image.handler import handler


class TestGetImageHandler:
    def test_metadata_by_default(self, lambda_context, stored_image, image_event) -> None:
        response = handler(image_event(stored_image), lambda_context)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["image_id"] == stored_image
        assert body["original_file_name"] == "test_upload.png"
        assert body["mime_type"] == "image/png"
        assert body["description"] == "Test upload"

    def test_content_false_returns_metadata(self, lambda_context, stored_image, image_event) -> None:
        response = handler(image_event(stored_image, query={"content": "false"}), lambda_context)

        assert response["statusCode"] == 200
        assert "isBase64Encoded" not in response

    def test_content(self, lambda_context, stored_image, image_event, sample_image_binary) -> None:
        response = handler(image_event(stored_image, query={"content": "TRUE"}), lambda_context)

        assert response["statusCode"] == 200
        assert response["isBase64Encoded"] is True
        assert base64.b64decode(response["body"]) == sample_image_binary

        headers = response["headers"]
        assert headers["Content-Type"] == "image/png"
        assert headers["Content-Length"] == str(len(sample_image_binary))
        header_metadata = json.loads(headers["X-Image-Metadata"])
        assert header_metadata["image_id"] == stored_image
        assert header_metadata["file_size_bytes"] == len(sample_image_binary)
        assert "content_id" not in header_metadata

    def test_not_found(self, lambda_context, storage, image_event) -> None:
        response = handler(image_event("img_missing"), lambda_context)

        assert response["statusCode"] == 404
        body = json.loads(response["body"])
        assert body["error"] == "NOT_FOUND"
        assert body["message"] == "Image not found: img_missing"

    def test_content_not_found(self, lambda_context, storage, image_event) -> None:
        response = handler(image_event("img_missing", query={"content": "true"}), lambda_context)

        assert response["statusCode"] == 404

    def test_missing_content_object(self, lambda_context, storage, stored_image, image_event, s3_bucket) -> None:
        content_id = storage.get_metadata(stored_image).content_id
        s3_bucket.delete_object(Bucket="test-image-bucket", Key=f"content/{content_id}")

        response = handler(image_event(stored_image, query={"content": "true"}), lambda_context)

        assert response["statusCode"] == 404

    def test_missing_image_id(self, lambda_context, image_event) -> None:
        response = handler(image_event(None), lambda_context)

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["error"] == "BAD_REQUEST"

    def test_blank_image_id(self, lambda_context, image_event) -> None:
        response = handler(image_event("   "), lambda_context)

        assert response["statusCode"] == 400
