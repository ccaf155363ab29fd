"""Listas de supressão (blocks, bounces, invalid emails, spam reports, unsubscribes).

Todas as listas compartilham as mesmas operações; o que muda é apenas o path e o
modelo decodificado, descritos por um ``SuppressionEndpoint``.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

from .. import constants
from ..errors import ValidationError, ValidationErrorCode
from ..events import Block, Bounce, GlobalUnsubscribe, InvalidEmail, SpamReport, list_of
from ..request import HTTPMethod, RequestDescriptor
from ..response import Page
from ..types import ContentType, to_timestamp

GLOBAL_UNSUBSCRIBES_PATH = "/v3/asm/suppressions/global"


@dataclass(frozen=True)
class SuppressionEndpoint:
    path: str
    decoder: Callable[[Any], Any]
    bulk_delete: bool = True  # Aceita DELETE com {delete_all, emails} no path da lista


BLOCKS = SuppressionEndpoint("/v3/suppression/blocks", list_of(Block))
BOUNCES = SuppressionEndpoint("/v3/suppression/bounces", list_of(Bounce))
INVALID_EMAILS = SuppressionEndpoint("/v3/suppression/invalid_emails", list_of(InvalidEmail))
SPAM_REPORTS = SuppressionEndpoint("/v3/suppression/spam_reports", list_of(SpamReport))
GLOBAL_UNSUBSCRIBES = SuppressionEndpoint("/v3/suppression/unsubscribes",
                                          list_of(GlobalUnsubscribe),
                                          bulk_delete=False)


def validate_page(page: Optional[Page]) -> None:
    if page is not None and page.limit not in constants.PAGE_LIMIT_RANGE:
        raise ValidationError(ValidationErrorCode.LIMIT_OUT_OF_RANGE, page.limit)


def page_query(page: Optional[Page]) -> list:
    if page is None:
        return []
    return [('limit', page.limit), ('offset', page.offset)]


def _email_path(base: str, email: str) -> str:
    return f"{base}/{quote(email, safe='@')}"


def list_suppressions(endpoint: SuppressionEndpoint,
                      start: Optional[datetime] = None,
                      end: Optional[datetime] = None,
                      page: Optional[Page] = None) -> RequestDescriptor:
    """Lista as entradas de uma lista de supressão.

    Args:
        endpoint (SuppressionEndpoint): Lista consultada.
        start (typing.Optional[datetime]): Início do intervalo (``start_time``).
        end (typing.Optional[datetime]): Fim do intervalo (``end_time``).
        page (typing.Optional[Page]): Paginação; o limite deve estar entre 1 e 500.

    Returns:
        RequestDescriptor: Descritor cujo modelo é uma lista de eventos.
    """
    query = page_query(page)
    if start is not None:
        query.append(('start_time', to_timestamp(start)))
    if end is not None:
        query.append(('end_time', to_timestamp(end)))
    return RequestDescriptor(method=HTTPMethod.GET,
                             path=endpoint.path,
                             query=query,
                             content_type=ContentType.FORM_URL_ENCODED,
                             decoder=endpoint.decoder,
                             validator=lambda: validate_page(page))


def get_suppression(endpoint: SuppressionEndpoint, email: str) -> RequestDescriptor:
    return RequestDescriptor(method=HTTPMethod.GET,
                             path=_email_path(endpoint.path, email),
                             content_type=ContentType.FORM_URL_ENCODED,
                             decoder=endpoint.decoder)


def delete_suppressions(endpoint: SuppressionEndpoint,
                        emails: Optional[List[str]] = None,
                        delete_all: bool = False) -> RequestDescriptor:
    """Remove entradas de uma lista de supressão.

    Args:
        endpoint (SuppressionEndpoint): Lista alterada.
        emails (typing.Optional[typing.List[str]]): Endereços a remover.
        delete_all (bool): Remove todas as entradas da lista.

    Returns:
        RequestDescriptor: Descritor ``DELETE`` com corpo JSON.

    Raises:
        ValueError: Se a lista não aceitar remoção em lote (use
            ``delete_global_unsubscribe`` para os descadastros globais).
    """
    if not endpoint.bulk_delete:
        raise ValueError(f"A lista '{endpoint.path}' não aceita remoção em lote")
    body: Dict[str, Any] = {}
    if delete_all:
        body['delete_all'] = True
    if emails is not None:
        body['emails'] = list(emails)
    return RequestDescriptor(method=HTTPMethod.DELETE, path=endpoint.path, body=body)


def add_global_unsubscribes(emails: List[str]) -> RequestDescriptor:
    return RequestDescriptor(method=HTTPMethod.POST,
                             path=GLOBAL_UNSUBSCRIBES_PATH,
                             body={'recipient_emails': list(emails)},
                             decoder=dict)


def delete_global_unsubscribe(email: str) -> RequestDescriptor:
    return RequestDescriptor(method=HTTPMethod.DELETE,
                             path=_email_path(GLOBAL_UNSUBSCRIBES_PATH, email))
