""" The ldcontext module is used to process JSON-LD contexts. """
from .context import ActiveContext
from .definition import (
    Container, ContainerItem, Direction, TermDefinition,
    TermDefinitionBuilder)
from .errors import ErrorCode, JsonLdError
from .expand import expand_iri
from .nullable import NULL
from .processor import (
    MAX_CONTEXT_URLS, Processor, aiohttp_document_loader,
    async_process_context, get_document_loader, load_document,
    process_context, requests_document_loader, set_document_loader)
from .remote import Profile, dummy_document_loader, parse_link_header

__all__ = [
    'ActiveContext', 'Container', 'ContainerItem', 'Direction',
    'ErrorCode', 'JsonLdError', 'MAX_CONTEXT_URLS', 'NULL', 'Processor',
    'Profile', 'TermDefinition', 'TermDefinitionBuilder',
    'aiohttp_document_loader', 'async_process_context', 'dummy_document_loader',
    'expand_iri', 'get_document_loader', 'load_document', 'parse_link_header',
    'process_context', 'requests_document_loader', 'set_document_loader']
