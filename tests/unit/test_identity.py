"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

import dataclasses

import pytest

from aws_basic_signer import AWSCredentials


@pytest.mark.parametrize(
    "region,access_key,secret_key,missing_fields",
    [
        ("us-east-1", "AKID1234EXAMPLE", "SECRET1234", []),
        ("", "AKID1234EXAMPLE", "SECRET1234", ["region"]),
        ("us-east-1", "", "SECRET1234", ["access_key"]),
        ("", "", "", ["region", "access_key", "secret_key"]),
    ],
)
def test_aws_credentials(
    region: str, access_key: str, secret_key: str, missing_fields: list[str]
) -> None:
    creds = AWSCredentials(region=region, access_key=access_key, secret_key=secret_key)
    assert creds.region == region
    assert creds.access_key == access_key
    assert creds.secret_key == secret_key
    assert creds.missing_fields == missing_fields


def test_aws_credentials_are_frozen() -> None:
    creds = AWSCredentials(
        region="us-east-1", access_key="AKID1234EXAMPLE", secret_key="SECRET1234"
    )
    with pytest.raises(dataclasses.FrozenInstanceError):
        creds.secret_key = "OTHER"  # type: ignore[misc]


def test_aws_credentials_repr_hides_secret() -> None:
    creds = AWSCredentials(
        region="us-east-1", access_key="AKID1234EXAMPLE", secret_key="SECRET1234"
    )
    assert "SECRET1234" not in repr(creds)
    assert "AKID1234EXAMPLE" in repr(creds)


def test_aws_credentials_require_keywords() -> None:
    with pytest.raises(TypeError):
        AWSCredentials("us-east-1", "AKID", "SECRET")  # type: ignore[misc]
