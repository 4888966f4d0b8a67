import json
from unittest.mock import MagicMock

from botocore.exceptions import ClientError

from src.seniku.config.s3_config import BUCKETS, ensure_buckets


def test_missing_buckets_are_created_with_public_read_policy():
    client = MagicMock()
    client.head_bucket.side_effect = ClientError({"Error": {"Code": "404"}}, "HeadBucket")

    ensure_buckets(client)

    assert client.create_bucket.call_count == len(BUCKETS)
    policies = {
        call.kwargs["Bucket"]: json.loads(call.kwargs["Policy"])
        for call in client.put_bucket_policy.call_args_list
    }
    assert set(policies) == set(BUCKETS)
    for bucket, policy in policies.items():
        statement = policy["Statement"][0]
        assert statement["Effect"] == "Allow"
        assert statement["Action"] == ["s3:GetObject"]
        assert statement["Resource"] == [f"arn:aws:s3:::{bucket}/*"]


def test_existing_buckets_still_get_policy():
    client = MagicMock()

    ensure_buckets(client)

    client.create_bucket.assert_not_called()
    assert client.put_bucket_policy.call_count == len(BUCKETS)


def test_forbidden_bucket_is_left_alone():
    client = MagicMock()
    client.head_bucket.side_effect = ClientError({"Error": {"Code": "403"}}, "HeadBucket")

    ensure_buckets(client)

    client.create_bucket.assert_not_called()
    client.put_bucket_policy.assert_not_called()


def test_no_client_is_a_noop():
    ensure_buckets(None)
