"""HTTP gateway exposing CRUD and multipart uploads over an S3-compatible object store."""
