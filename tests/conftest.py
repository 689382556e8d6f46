"""In-memory stand-ins for the Cloud Storage client, bucket and blob."""

import pytest


class FakeBlob:
    def __init__(self, bucket, name, data=None, metadata=None):
        self.bucket = bucket
        self.name = name
        self.data = data
        self.metadata = metadata
        self.content_type = None
        self.public = False
        self.fail_with = None

    def upload_from_string(self, data, content_type=None):
        if self.fail_with is not None:
            raise self.fail_with
        self.data = data
        self.content_type = content_type

    def download_as_bytes(self):
        if self.fail_with is not None:
            raise self.fail_with
        return self.data if isinstance(self.data, bytes) else self.data.encode("utf-8")

    def download_as_text(self):
        if self.fail_with is not None:
            raise self.fail_with
        return self.data if isinstance(self.data, str) else self.data.decode("utf-8")

    def make_public(self):
        self.public = True

    @property
    def public_url(self):
        return f"https://storage.googleapis.com/{self.bucket.name}/{self.name}"


class FakeBucket:
    def __init__(self, name):
        self.name = name
        self.blobs = {}

    def blob(self, name):
        return self.blobs.setdefault(name, FakeBlob(self, name))

    def get_blob(self, name):
        blob = self.blobs.get(name)
        return blob if blob is not None and blob.data is not None else None

    def list_blobs(self, prefix=""):
        return [b for name, b in self.blobs.items() if name.startswith(prefix) and b.data is not None]

    def add(self, name, data, metadata=None):
        self.blobs[name] = FakeBlob(self, name, data, metadata)
        return self.blobs[name]


class FakeClient:
    def __init__(self):
        self.buckets = {}

    def bucket(self, name):
        return self.buckets.setdefault(name, FakeBucket(name))


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def bucket(fake_client):
    return fake_client.bucket("minutes")
