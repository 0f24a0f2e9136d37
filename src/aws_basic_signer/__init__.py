"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0

AWS Basic Signer computes AWS Signature Version 4 ``Authorization`` header values
for requests sent with any HTTP tool, without a full SDK.
"""

from __future__ import annotations

from ._http import SigningRequest, format_amz_date, parse_query
from ._identity import AWSCredentials
from .credentials import create_default_chain, resolve_credentials
from .signers import CanonicalRequestBuilder, SigningKeyLadder, SigV4Signer

__license__ = "Apache-2.0"
__version__ = "0.1.0"

__all__ = (
    "AWSCredentials",
    "CanonicalRequestBuilder",
    "SigV4Signer",
    "SigningKeyLadder",
    "SigningRequest",
    "create_default_chain",
    "format_amz_date",
    "parse_query",
    "resolve_credentials",
)
