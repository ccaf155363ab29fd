from typing import Optional

from ..events import Subuser, list_of
from ..request import HTTPMethod, RequestDescriptor
from ..response import Page
from ..types import ContentType
from .suppression import page_query, validate_page

SUBUSERS_PATH = "/v3/subusers"


def list_subusers(page: Optional[Page] = None,
                  username: Optional[str] = None) -> RequestDescriptor:
    """Lista os subusuários da conta, opcionalmente filtrando por nome de usuário."""
    query = page_query(page)
    if username is not None:
        query.append(('username', username))
    return RequestDescriptor(method=HTTPMethod.GET,
                             path=SUBUSERS_PATH,
                             query=query,
                             content_type=ContentType.FORM_URL_ENCODED,
                             decoder=list_of(Subuser),
                             validator=lambda: validate_page(page))
