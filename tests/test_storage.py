import itertools
import json

import pytest
from google.api_core import exceptions as api_exceptions

from smart_minutes import storage
from smart_minutes.errors import StorageError


@pytest.fixture
def clock(monkeypatch):
    ticks = itertools.count(1000)
    monkeypatch.setattr(storage, "now_ms", lambda: next(ticks))


def test_upload_audio(bucket):
    uri = storage.upload_audio(bucket, b"mp3", "1700-meeting.mp3")
    assert uri == "gs://minutes/Processed/1700-meeting.mp3"
    blob = bucket.blobs["Processed/1700-meeting.mp3"]
    assert blob.data == b"mp3"
    assert blob.content_type == "audio/mpeg"


def test_upload_audio_failure(bucket):
    bucket.blob("Processed/a.mp3").fail_with = api_exceptions.Forbidden("denied")
    with pytest.raises(StorageError) as info:
        storage.upload_audio(bucket, b"mp3", "a.mp3")
    assert info.value.operation == "upload_audio"


def test_publish_document(bucket):
    link = storage.publish_document(bucket, b"docx", "meeting-Template-Formal-1.docx")
    blob = bucket.blobs["Minutes/meeting-Template-Formal-1.docx"]
    assert blob.public
    assert blob.content_type == storage.DOCX_MIME_TYPE
    assert link == "https://storage.googleapis.com/minutes/Minutes/meeting-Template-Formal-1.docx"


def test_push_ids_sort_by_time(clock):
    first, second = storage.new_push_id(), storage.new_push_id()
    assert first.startswith("0000000001000-")
    assert first < second


def test_record_store_round_trip(bucket, clock):
    store = storage.RecordStore(bucket)
    first = store.push_summary("u1", {"audioFileName": "a.mp3", "formal_template": "link-a"})
    second = store.push_summary("u1", {"audioFileName": "b.mp3", "formal_template": "link-b"})
    store.push_summary("u2", {"audioFileName": "c.mp3"})

    blob = bucket.blobs[f"records/summaries/u1/{first}.json"]
    assert json.loads(blob.data)["formal_template"] == "link-a"
    assert blob.content_type == "application/json"

    minutes = store.list_minutes("u1")
    assert [m["summaryId"] for m in minutes] == [first, second]
    assert minutes[1] == {"summaryId": second, "audioFileName": "b.mp3", "formal_template": "link-b"}


def test_list_minutes_for_unknown_user(bucket):
    assert storage.RecordStore(bucket).list_minutes("nobody") == []


def test_latest_transcription(bucket, clock):
    store = storage.RecordStore(bucket)
    assert store.latest_transcription("u1") is None
    store.push_transcription("u1", {"text": "old"})
    store.push_transcription("u1", {"text": "new"})
    assert store.latest_transcription("u1") == {"text": "new"}


def test_custom_prefix(bucket, clock):
    store = storage.RecordStore(bucket, prefix="db/")
    key = store.push_transcription("u1", {"text": "hi"})
    assert f"db/transcriptions/u1/{key}.json" in bucket.blobs


def test_save_and_read_text(bucket):
    storage.save_text(bucket, "Transcripts/u1/a.txt", "Speaker 1:\nhi", metadata={"audioFileName": "a.mp3"})
    blob = bucket.blobs["Transcripts/u1/a.txt"]
    assert blob.content_type == "text/plain"
    assert storage.read_text(bucket, "Transcripts/u1/a.txt") == ("Speaker 1:\nhi", {"audioFileName": "a.mp3"})
    assert storage.read_text(bucket, "Transcripts/u1/missing.txt") is None


def test_save_text_failure(bucket):
    bucket.blob("Transcripts/u1/a.txt").fail_with = api_exceptions.Forbidden("denied")
    with pytest.raises(StorageError) as info:
        storage.save_text(bucket, "Transcripts/u1/a.txt", "x")
    assert info.value.operation == "save_text"


def test_download_bytes(bucket):
    bucket.add("Audios/u1/a.mp3", b"mp3")
    assert storage.download_bytes(bucket, "Audios/u1/a.mp3") == b"mp3"
    bucket.blob("Audios/u1/b.mp3").fail_with = api_exceptions.NotFound("gone")
    with pytest.raises(StorageError) as info:
        storage.download_bytes(bucket, "Audios/u1/b.mp3")
    assert info.value.operation == "download"
