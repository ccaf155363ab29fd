"""Descritor genérico de requisições HTTP e esquemas de autenticação.

Uma chamada da API é descrita por um único valor, ``RequestDescriptor``, montado pelas
funções de fábrica em ``majorkey.mail.endpoints``. Não há hierarquia de classes por
endpoint: cada fábrica apenas preenche método, path, query, corpo, decodificador e
validador.
"""
import base64
import json
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, FrozenSet, List, Optional, Tuple
from urllib.parse import urlencode

from .errors import RequestConstructionError
from .types import ContentType
from .validation import validate_content_type

_PATH = re.compile(r'^/[^\s?#]*$')

BEARER = "Bearer"
BASIC = "Basic"


class HTTPMethod(Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def has_body(self) -> bool:
        return self is not HTTPMethod.GET


@dataclass(frozen=True)
class Authentication:
    """Credencial enviada no cabeçalho ``Authorization``.

    Attributes:
        prefix (str): Esquema do cabeçalho (``Bearer`` ou ``Basic``).
        value (str): Valor secreto já codificado.
        description (str): Nome legível do tipo de credencial, usado em mensagens de erro.
    """
    prefix: str
    value: str = field(repr=False)
    description: str

    @classmethod
    def api_key(cls, key: str) -> 'Authentication':
        return cls(prefix=BEARER, value=key, description="API Key")

    @classmethod
    def credential(cls, username: str, password: str) -> 'Authentication':
        token = base64.b64encode(f"{username}:{password}".encode('utf-8')).decode('ascii')
        return cls(prefix=BASIC, value=token, description="credential")

    @property
    def authorization_header(self) -> str:
        return f"{self.prefix} {self.value}"


ALL_SCHEMES: FrozenSet[str] = frozenset({BEARER, BASIC})

Query = List[Tuple[str, Any]]


@dataclass(frozen=True)
class RequestDescriptor:
    """Descrição completa de uma chamada da API.

    Attributes:
        method (HTTPMethod): Verbo HTTP.
        path (str): Caminho absoluto a partir do host (ex.: ``/v3/mail/send``).
        query (Query): Pares ``(nome, valor)`` da query string, em ordem. Nomes podem repetir.
        body (typing.Any): Objeto com ``to_dict()`` ou estrutura JSON pronta; ignorado em GET.
        content_type (ContentType): Valor do cabeçalho ``Content-Type``.
        accept (ContentType): Valor do cabeçalho ``Accept``.
        decoder (typing.Optional[typing.Callable]): Converte o JSON da resposta no modelo.
        validator (typing.Optional[typing.Callable]): Validação específica do endpoint.
        supports_impersonation (bool): Se aceita o cabeçalho ``On-behalf-of``.
        auth_schemes (typing.FrozenSet[str]): Prefixos de autenticação aceitos.
        host (typing.Optional[str]): Host próprio do endpoint; None usa o host da sessão.
    """
    method: HTTPMethod
    path: str
    query: Query = field(default_factory=list)
    body: Any = None
    content_type: ContentType = ContentType.JSON
    accept: ContentType = ContentType.JSON
    decoder: Optional[Callable[[Any], Any]] = None
    validator: Optional[Callable[[], None]] = None
    supports_impersonation: bool = True
    auth_schemes: FrozenSet[str] = ALL_SCHEMES
    host: Optional[str] = None

    def supports(self, authentication: Authentication) -> bool:
        return authentication.prefix in self.auth_schemes

    def validate(self) -> None:
        """Valida os content types declarados e, em seguida, o próprio endpoint.

        Raises:
            ValidationError: Na primeira regra violada.
        """
        validate_content_type(self.content_type)
        validate_content_type(self.accept)
        if self.validator is not None:
            self.validator()

    @property
    def query_string(self) -> str:
        return urlencode([(nome, str(valor)) for nome, valor in self.query])

    @property
    def path_with_query(self) -> str:
        if not self.query:
            return self.path
        return f"{self.path}?{self.query_string}"

    def url(self, default_host: str) -> str:
        """Monta a URL absoluta da chamada.

        Args:
            default_host (str): Host usado quando o descritor não define o seu.

        Returns:
            str: URL completa, com query string.

        Raises:
            RequestConstructionError: Se o path não for absoluto ou contiver espaços.
        """
        if not _PATH.match(self.path):
            raise RequestConstructionError(self.path)
        host = (self.host or default_host).rstrip('/')
        return f"{host}{self.path_with_query}"

    def payload(self) -> Any:
        if not self.method.has_body or self.body is None:
            return None
        if hasattr(self.body, 'to_dict'):
            return self.body.to_dict()
        return self.body

    def encode_body(self, indent: Optional[int] = None) -> Optional[bytes]:
        payload = self.payload()
        if payload is None:
            return None
        return json.dumps(payload, ensure_ascii=False, indent=indent).encode('utf-8')

    def decode(self, payload: Any) -> Any:
        if self.decoder is None:
            return None
        return self.decoder(payload)

    def describe(self) -> str:
        """Representação legível da chamada, no formato de um blueprint de API."""
        linhas = [
            f"# {self.method.value} {self.path_with_query}",
            f"+ Request ({self.content_type})",
            "    + Headers",
            f"            Accept: {self.accept}",
        ]
        corpo = self.encode_body(indent=2)
        if corpo is not None:
            linhas.append("    + Body")
            linhas.extend(f"            {linha}" for linha in corpo.decode('utf-8').splitlines())
        return "\n".join(linhas)

    def __str__(self):
        return self.describe()
