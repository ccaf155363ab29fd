"""Resposta tipada de uma chamada da API.

A resposta é derivada de uma única troca HTTP e é imutável. A decodificação do corpo
é feita em melhor esforço: se o corpo não puder ser convertido no modelo esperado, o
atributo ``model`` fica None e o status e o corpo bruto continuam disponíveis.
"""
import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from requests.structures import CaseInsensitiveDict

from .errors import HTTPStatusError

logger = logging.getLogger(__name__)

_REL = re.compile(r'rel="(first|prev|next|last)"')
_LIMIT = re.compile(r'[?&]limit=(\d+)')
_OFFSET = re.compile(r'[?&]offset=(\d+)')


@dataclass(frozen=True)
class Page:
    """Janela de paginação (``limit`` itens a partir de ``offset``)."""
    limit: int
    offset: int = 0


@dataclass(frozen=True)
class RateLimit:
    limit: int
    remaining: int
    reset_at: datetime

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> Optional['RateLimit']:
        """Extrai os cabeçalhos ``X-RateLimit-*``; None se algum faltar ou for inválido."""
        try:
            return cls(limit=int(headers['X-RateLimit-Limit']),
                       remaining=int(headers['X-RateLimit-Remaining']),
                       reset_at=datetime.fromtimestamp(float(headers['X-RateLimit-Reset']),
                                                       tz=timezone.utc))
        except (KeyError, TypeError, ValueError):
            return None


@dataclass(frozen=True)
class Pagination:
    first: Optional[Page] = None
    previous: Optional[Page] = None
    next: Optional[Page] = None
    last: Optional[Page] = None

    @classmethod
    def from_link_header(cls, link: Optional[str]) -> Optional['Pagination']:
        """Interpreta o cabeçalho ``Link``.

        Cada entrada separada por vírgula precisa de ``rel``, ``limit`` e ``offset``;
        entradas incompletas são ignoradas. Para relações repetidas vale a primeira.

        Args:
            link (typing.Optional[str]): Valor do cabeçalho ``Link``.

        Returns:
            typing.Optional[Pagination]: Paginação, ou None se o cabeçalho estiver ausente.
        """
        if link is None:
            return None
        paginas = {}
        for item in link.split(','):
            rel = _REL.search(item)
            limit = _LIMIT.search(item)
            offset = _OFFSET.search(item)
            if not (rel and limit and offset):
                continue
            paginas.setdefault(rel.group(1), Page(int(limit.group(1)), int(offset.group(1))))
        return cls(first=paginas.get('first'),
                   previous=paginas.get('prev'),
                   next=paginas.get('next'),
                   last=paginas.get('last'))


@dataclass(frozen=True)
class Response:
    status_code: int
    raw_body: bytes = b''
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)
    model: Any = None
    rate_limit: Optional[RateLimit] = None
    pagination: Optional[Pagination] = None

    @classmethod
    def from_http(cls,
                  http_response: Any,
                  decoder: Optional[Callable[[Any], Any]] = None) -> 'Response':
        """Converte uma resposta do ``requests`` em Response.

        Args:
            http_response (requests.Response): Resposta HTTP bruta.
            decoder (typing.Optional[typing.Callable]): Converte o JSON no modelo esperado.

        Returns:
            Response: Resposta tipada.
        """
        headers = CaseInsensitiveDict(http_response.headers or {})
        raw_body = http_response.content or b''
        return cls(status_code=http_response.status_code,
                   raw_body=raw_body,
                   headers=headers,
                   model=cls._decode(raw_body, decoder),
                   rate_limit=RateLimit.from_headers(headers),
                   pagination=Pagination.from_link_header(headers.get('Link')))

    @staticmethod
    def _decode(raw_body: bytes, decoder: Optional[Callable[[Any], Any]]) -> Any:
        if decoder is None or not raw_body:
            return None
        try:
            return decoder(json.loads(raw_body))
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            logger.debug("Não foi possível decodificar o corpo da resposta: %s" % (str(e),))
            return None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.raw_body.decode('utf-8', errors='replace')

    def json(self) -> Any:
        """Retorna o corpo como JSON, ou None se estiver vazio.

        Raises:
            ValueError: Se o corpo não for JSON válido.
        """
        if not self.raw_body:
            return None
        return json.loads(self.raw_body)

    def raise_for_status(self) -> 'Response':
        """Levanta HTTPStatusError se o status não estiver na faixa 2xx.

        Returns:
            Response: A própria resposta, para encadeamento.
        """
        if not self.ok:
            raise HTTPStatusError(self.status_code, self.text)
        return self
