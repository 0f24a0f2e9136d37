"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

from dataclasses import dataclass, field


@dataclass(kw_only=True, frozen=True)
class AWSCredentials:
    region: str
    """The region the signing key is scoped to, e.g. ``us-east-1``."""

    access_key: str
    """A unique identifier for an AWS user or role."""

    secret_key: str = field(repr=False)
    """A secret key used in conjunction with the access key to derive the
    signing key. Excluded from ``repr``."""

    @property
    def missing_fields(self) -> list[str]:
        """Names of fields that are empty."""
        return [
            name
            for name in ("region", "access_key", "secret_key")
            if not getattr(self, name)
        ]
