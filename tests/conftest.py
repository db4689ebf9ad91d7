"""Shared fixtures for pycivic tests."""

import pytest
from payloads import DOCUMENT_URL, FOLDER_URL

from pycivic.auth import AuthorizedSession, Credential
from pycivic.query import DocInfo, DocQuery, DocumentHeaders


@pytest.fixture
def credential():
    return (
        Credential.builder()
        .api_key("partition-key")
        .partition("city")
        .name("clerk")
        .password("secret")
        .host("example.gov")
        .build()
    )


@pytest.fixture
def session():
    return AuthorizedSession(
        api_key="partition-key", partition="city", session_id="sess-1"
    )


@pytest.fixture
def document_info():
    return DocInfo(DocumentHeaders(), DocQuery(), DOCUMENT_URL)


@pytest.fixture
def folder_info():
    return DocInfo(DocumentHeaders(), DocQuery(), FOLDER_URL)
