TEST_BUCKET_NAME = "test-object-gateway"
