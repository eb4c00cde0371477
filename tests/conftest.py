import asyncio

import pytest

from ldcontext import processor
from ldcontext.context import ActiveContext
from ldcontext.errors import ErrorCode, JsonLdError


def pytest_addoption(parser):
    # Do only long options for pytest integration; pytest reserves
    # lowercase single-letter short options for its own CLI flags.
    parser.addoption(
        '--loader',
        dest='loader',
        default='requests',
        help='The remote URL document loader: requests, aiohttp',
    )
    parser.addoption(
        "--network",
        action="store_true",
        default=False,
        help="Run the tests marked as requiring network access",
    )


def pytest_configure(config):
    # Register custom markers
    config.addinivalue_line(
        "markers", "network: marks tests as requiring network access (may be slow)"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("network"):
        return
    skip_network = pytest.mark.skip(reason="needs --network to run")
    for item in items:
        if "network" in item.keywords:
            item.add_marker(skip_network)


class FakeLoader:
    """In-memory document loader that records every URL it loads."""

    def __init__(self, documents, document_urls=None):
        self.documents = documents
        self.document_urls = document_urls or {}
        self.calls = []
        self.options = []

    def __call__(self, url, options=None):
        self.calls.append(url)
        self.options.append(options)
        if url not in self.documents:
            raise JsonLdError(
                'Not found.', 'jsonld.LoadDocumentError', {'url': url},
                code=ErrorCode.LOADING_DOCUMENT_FAILED)
        return {
            'contentType': 'application/ld+json',
            'contextUrl': None,
            'documentUrl': self.document_urls.get(url, url),
            'document': self.documents[url]
        }


class AsyncFakeLoader(FakeLoader):
    """FakeLoader with a coroutine call, like the aiohttp loader."""

    async def __call__(self, url, options=None):
        await asyncio.sleep(0)
        return FakeLoader.__call__(self, url, options)


@pytest.fixture
def fake_loader():
    return FakeLoader


@pytest.fixture
def async_fake_loader():
    return AsyncFakeLoader


@pytest.fixture
def join():
    """Synchronously joins a local context onto an active context."""
    def join(local_ctx, active_ctx=None, options=None,
             override_protected=False, propagate=True):
        if active_ctx is None:
            active_ctx = ActiveContext()
        return asyncio.run(active_ctx.join_context_value(
            processor.Processor(options), local_ctx,
            override_protected=override_protected, propagate=propagate))
    return join


@pytest.fixture
def network_loader(request):
    """The loader selected with --loader."""
    loader = request.config.getoption('loader')
    if loader == 'aiohttp':
        pytest.importorskip('aiohttp')
        return processor.aiohttp_document_loader()
    pytest.importorskip('requests')
    return processor.requests_document_loader()
