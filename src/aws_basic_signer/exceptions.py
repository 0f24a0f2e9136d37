"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""


class BaseAWSSDKException(Exception):
    """Top-level exception to capture signer-related errors."""


class MalformedInputException(BaseAWSSDKException, ValueError):
    """A signing input could not be interpreted."""


class MalformedRequestException(MalformedInputException):
    """The request path or URL can't be used to build a canonical request."""


class InvalidTimestampException(MalformedInputException):
    """The ``x-amz-date`` value isn't in ``YYYYMMDD'T'HHMMSS'Z'`` form."""


class MissingExpectedParameterException(BaseAWSSDKException, ValueError):
    """Some request fields are required to be present for signing."""


class CredentialResolutionException(BaseAWSSDKException):
    """Credentials could not be resolved from a source."""


class MissingCredentialFieldException(CredentialResolutionException, ValueError):
    """Region, access key or secret key is absent after lookup."""


class ProfileNotFoundException(CredentialResolutionException):
    """The requested profile section doesn't exist in a shared file."""


class FieldNotFoundInProfileException(CredentialResolutionException):
    """The profile exists but lacks a required key."""
